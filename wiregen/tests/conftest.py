"""Unit tests configuration file."""

from collections import deque
from dataclasses import dataclass, field
from itertools import count
from typing import Any

import pytest

from wiregen.generator import loads
from wiregen.generator.python import render


def pytest_configure(config):
    """Disable verbose output when running tests."""
    terminal = config.pluginmanager.getplugin("terminal")
    if terminal:
        terminal.TerminalReporter.showfspath = False


@dataclass
class SentMessage:
    object_id: int
    opcode: int
    args: list[tuple[str, Any]] = field(default_factory=list)


class FakeStream:
    """In-memory message cursor and stream.

    Writes are recorded as (kind, value) pairs; reads pop queued pairs and
    fail if the kind does not match, so a decode paired with the wrong encode
    is caught.
    """

    def __init__(self, fail_commit=False):
        self.incoming = deque()
        self.committed: list[SentMessage] = []
        self.fail_commit = fail_commit
        self._pending: dict[int, SentMessage] = {}
        self._keys = count()
        self._current = None

    def feed(self, *values):
        self.incoming.extend(values)

    def replay(self):
        """Queue the arguments of the last committed message for reading."""
        self.incoming.extend(self.committed[-1].args)

    def _read(self, kind):
        if not self.incoming:
            raise EOFError("message truncated")
        actual, value = self.incoming.popleft()
        if actual != kind:
            raise TypeError(f"expected {kind}, found {actual}")
        return value

    def int32(self):
        return self._read("int32")

    def uint32(self):
        return self._read("uint32")

    def fixed(self):
        return self._read("fixed")

    def string(self):
        return self._read("string")

    def bytes(self):
        return self._read("bytes")

    def fd(self):
        return self._read("fd")

    def object(self):
        return self._read("object")

    def new_id(self):
        return self._read("new_id")

    def start_message(self, object_id, opcode):
        key = next(self._keys)
        self._pending[key] = SentMessage(object_id, opcode)
        self._current = key
        return key

    def _send(self, kind, value):
        self._pending[self._current].args.append((kind, value))

    def send_int32(self, value):
        self._send("int32", value)

    def send_uint32(self, value):
        self._send("uint32", value)

    def send_fixed(self, value):
        self._send("fixed", value)

    def send_string(self, value):
        self._send("string", value)

    def send_bytes(self, value):
        self._send("bytes", bytes(value))

    def send_fd(self, value):
        self._send("fd", value)

    def send_object(self, value):
        self._send("object", value)

    def send_new_id(self, value):
        self._send("new_id", value)

    def commit(self, key):
        message = self._pending.pop(key)
        if self.fail_commit:
            raise ConnectionError("connection closed")
        self.committed.append(message)


class FakeClient:
    def __init__(self, stream):
        self._stream = stream

    def stream(self):
        return self._stream


class FakeLease:
    def __init__(self, value, id=1):
        self.value = value
        self.id = id

    def downcast(self, cls):
        return self if isinstance(self.value, cls) else None


@dataclass
class FakeMessage:
    object_id: int
    opcode: int


@pytest.fixture
def stream():
    return FakeStream()


@pytest.fixture
def client(stream):
    return FakeClient(stream)


@pytest.fixture
def loop():
    return object()


@pytest.fixture
def lease():
    return FakeLease


@pytest.fixture
def message():
    return FakeMessage


@pytest.fixture
def gen_code():
    """Render a protocol definition and execute the generated module."""

    def _gen_code(text):
        gbl = {"__name__": "generated"}
        exec(compile(render(loads(text)), "<generated>", "exec"), gbl)
        return gbl

    return _gen_code


@pytest.fixture
def failing_client():
    """A client whose stream fails every commit."""
    return FakeClient(FakeStream(fail_commit=True))
