"""Marshalling contracts and errors for generated protocol code.

The message cursor and message stream are provided by the hosting runtime;
generated code only relies on the methods described here.
"""

from typing import Protocol, TypeVar

from .types import Fd, Fixed, Id, NewId

T = TypeVar("T")


class WireError(RuntimeError):
    """Raised when an incoming message cannot be dispatched."""


class InvalidOpcode(WireError):
    """Raised when a message's opcode matches no request of its interface."""

    def __init__(self, interface: str, opcode: int) -> None:
        super().__init__(f"{interface}: invalid opcode {opcode}")
        self.interface = interface
        self.opcode = opcode


class InternalError(WireError):
    """Raised when the runtime hands dispatch an object of the wrong type."""


class MissingRequiredArgument(WireError):
    """Raised when a non-nullable argument is absent from a message."""

    def __init__(self, argument: str) -> None:
        super().__init__(f"missing required argument {argument}")
        self.argument = argument


def required(value: T | None, argument: str) -> T:
    """Return ``value``, failing if a non-nullable argument decoded as absent."""
    if value is None:
        raise MissingRequiredArgument(argument)
    return value


class MessageCursor(Protocol):
    """Reads the arguments of an incoming message, in order.

    Every read may raise if the message is truncated or malformed.
    """

    def int32(self) -> int: ...

    def uint32(self) -> int: ...

    def fixed(self) -> Fixed: ...

    def string(self) -> str | None: ...

    def bytes(self) -> bytes: ...

    def fd(self) -> Fd: ...

    def object(self) -> Id | None: ...

    def new_id(self) -> NewId: ...


class MessageStream(Protocol):
    """Writes outgoing messages.

    A message started with ``start_message`` becomes visible on the transport
    only once ``commit`` succeeds.
    """

    def start_message(self, object_id: Id, opcode: int) -> object: ...

    def send_int32(self, value: int) -> None: ...

    def send_uint32(self, value: int) -> None: ...

    def send_fixed(self, value: Fixed) -> None: ...

    def send_string(self, value: str | None) -> None: ...

    def send_bytes(self, value: bytes | bytearray | memoryview) -> None: ...

    def send_fd(self, value: Fd) -> None: ...

    def send_object(self, value: Id | None) -> None: ...

    def send_new_id(self, value: NewId) -> None: ...

    def commit(self, key: object) -> None: ...


class Stream(MessageCursor, MessageStream, Protocol):
    """A client connection's message cursor and stream."""
