"""Protocol definition loader for TOML schema files."""

import logging
import os
import tomllib
from collections.abc import Iterable

from .naming import member_name, type_name
from .types import DataType, Interface, Message, Protocol

log = logging.getLogger(__name__)

# Members every generated interface class already defines
RESERVED_MEMBERS = frozenset(
    {"dispatch", "into_object", "into_versioned_object", "INTERFACE", "VERSION"}
)


class SchemaError(RuntimeError):
    """Base class for errors raised while loading a protocol definition."""


class MalformedSchemaError(SchemaError):
    """Raised when a protocol definition is not valid TOML or has the wrong shape."""


class SchemaIOError(SchemaError):
    """Raised when a protocol definition file cannot be read."""


class SchemaEncodingError(SchemaError):
    """Raised when a protocol definition file is not valid UTF-8."""


class ValidationError(SchemaError):
    """Raised when protocol validation fails."""


def loads(text: str, *, strict: bool = False) -> Protocol:
    """Parse a protocol definition from TOML text.

    Args:
        text: The protocol definition.
        strict: Also run ``validate`` on the result.

    Returns:
        The loaded protocol.
    """
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise MalformedSchemaError(f"invalid TOML: {e}") from e

    try:
        protocol = Protocol.from_dict(data)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise MalformedSchemaError(f"invalid protocol definition: {e}") from e

    log.debug(
        "loaded protocol %s with %d interface(s)", protocol.name, len(protocol.interfaces)
    )

    if strict:
        validate(protocol)

    return protocol


def load(path: str | os.PathLike[str], *, strict: bool = False) -> Protocol:
    """Load a protocol definition file."""
    try:
        with open(path, "rb") as f:
            raw = f.read()
    except OSError as e:
        raise SchemaIOError(f"cannot read {os.fspath(path)}: {e.strerror or e}") from e

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise SchemaEncodingError(f"{os.fspath(path)} is not valid UTF-8: {e}") from e

    log.debug("read %s (%d bytes)", os.fspath(path), len(raw))
    return loads(text, strict=strict)


def _unique(names: Iterable[str], what: str, where: str) -> None:
    seen: set[str] = set()
    for name in names:
        if name in seen:
            raise ValidationError(f"{where}: duplicate {what} {name}")
        seen.add(name)


def _validate_message(interface: Interface, kind: str, message: Message) -> None:
    where = f"{interface.name}.{message.name}"
    if member_name(message.name) in RESERVED_MEMBERS:
        raise ValidationError(f"{where}: {kind} name {member_name(message.name)} is reserved")
    if message.since is not None and message.since > interface.version:
        raise ValidationError(
            f"{where}: {kind} since version {message.since}, "
            f"but the interface is version {interface.version}"
        )
    _unique((member_name(arg.name) for arg in message.args), "argument", where)
    for arg in message.args:
        if arg.interface is not None and arg.type not in (DataType.OBJECT, DataType.NEW_ID):
            raise ValidationError(
                f"{where}: argument {arg.name} of type {arg.type} cannot name an interface"
            )


def validate(protocol: Protocol) -> None:
    """Validate a loaded protocol definition.

    Loading on its own trusts the author; this adds the checks a permissive
    load skips. Names must be unique and must not shadow a generated member,
    enum values must be unique, and no version may exceed its interface.
    """
    _unique((i.name for i in protocol.interfaces), "interface", protocol.name)

    for interface in protocol.interfaces:
        # Requests, events and enums all become members of one generated class
        _unique(
            [member_name(r.name) for r in interface.requests]
            + [member_name(e.name) for e in interface.events]
            + [type_name(e.name) for e in interface.enums],
            "member",
            interface.name,
        )

        for request in interface.requests:
            _validate_message(interface, "request", request)
        for event in interface.events:
            _validate_message(interface, "event", event)

        for enum in interface.enums:
            where = f"{interface.name}.{enum.name}"
            if enum.since is not None and enum.since > interface.version:
                raise ValidationError(
                    f"{where}: enum since version {enum.since}, "
                    f"but the interface is version {interface.version}"
                )
            _unique((entry.name for entry in enum.entries), "entry", where)
            _unique((str(entry.value) for entry in enum.entries), "entry value", where)


def _signature(message: Message) -> list[tuple[DataType, bool, str | None]]:
    return [(arg.type, arg.nullable, arg.interface) for arg in message.args]


def _check_messages(
    interface: str, kind: str, old: list[Message], new: list[Message]
) -> None:
    for opcode, before in enumerate(old):
        if opcode >= len(new):
            raise ValidationError(
                f"{interface}: {kind} {before.name} (opcode {opcode}) was removed"
            )
        after = new[opcode]
        if after.name != before.name:
            raise ValidationError(
                f"{interface}: {kind} opcode {opcode} moved from {before.name} to {after.name}"
            )
        if _signature(after) != _signature(before):
            raise ValidationError(f"{interface}.{before.name}: {kind} arguments changed")


def check_compat(old: Protocol, new: Protocol) -> None:
    """Check that ``new`` only appends to ``old``.

    Opcodes are declaration indices, so removing, reordering or changing a
    request or event breaks peers built from ``old``.
    """
    interfaces = {i.name: i for i in new.interfaces}

    for before in old.interfaces:
        after = interfaces.get(before.name)
        if after is None:
            raise ValidationError(f"interface {before.name} was removed")
        if after.version < before.version:
            raise ValidationError(
                f"{before.name}: version went down from {before.version} to {after.version}"
            )
        _check_messages(before.name, "request", list(before.requests), list(after.requests))
        _check_messages(before.name, "event", list(before.events), list(after.events))
