"""Type definitions for protocol loading and code generation."""

from dataclasses import dataclass, field
from enum import StrEnum

from dataclasses_json import DataClassJsonMixin, config

U32_MAX = 0xFFFF_FFFF


class DataType(StrEnum):
    """Wire data type of a request or event argument."""

    INT = "int"
    UINT = "uint"
    FIXED = "fixed"
    STRING = "string"
    ARRAY = "array"
    FD = "fd"
    OBJECT = "object"
    NEW_ID = "new_id"


def _check_str(value: object, what: str) -> None:
    if not isinstance(value, str):
        raise TypeError(f"{what} must be a string, got {value!r}")


def _check_optional_str(value: object, what: str) -> None:
    if value is not None:
        _check_str(value, what)


def _check_bool(value: object, what: str) -> None:
    if not isinstance(value, bool):
        raise TypeError(f"{what} must be a boolean, got {value!r}")


def _check_u32(value: object, what: str) -> None:
    # bool is an int subclass, but `version = true` is not a version
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{what} must be an integer, got {value!r}")
    if not 0 <= value <= U32_MAX:
        raise ValueError(f"{what} {value} does not fit in 32 unsigned bits")


def _check_optional_u32(value: object, what: str) -> None:
    if value is not None:
        _check_u32(value, what)


@dataclass(frozen=True)
class Arg(DataClassJsonMixin):
    """Represents an argument of a request or event.

    `interface` pins the interface of an object or new_id argument. A pinned
    new_id travels as a plain object id; an unpinned one carries the interface
    name and version inline.
    """

    name: str
    type: DataType
    nullable: bool = field(default=False, metadata=config(field_name="allow-null"))
    interface: str | None = None
    enumeration: str | None = field(default=None, metadata=config(field_name="enum"))
    summary: str | None = None

    def __post_init__(self) -> None:
        _check_str(self.name, "arg name")
        if not isinstance(self.type, DataType):
            raise ValueError(f"arg {self.name}: unknown wire type {self.type!r}")
        _check_bool(self.nullable, f"arg {self.name}: allow-null")
        _check_optional_str(self.interface, f"arg {self.name}: interface")
        _check_optional_str(self.enumeration, f"arg {self.name}: enum")
        _check_optional_str(self.summary, f"arg {self.name}: summary")

    @property
    def is_pinned(self) -> bool:
        return self.interface is not None


@dataclass(frozen=True)
class Entry(DataClassJsonMixin):
    """Represents a single enum entry."""

    name: str
    value: int
    since: int | None = None
    summary: str | None = None
    description: str | None = None

    def __post_init__(self) -> None:
        _check_str(self.name, "entry name")
        _check_u32(self.value, f"entry {self.name}: value")
        _check_optional_u32(self.since, f"entry {self.name}: since")


@dataclass(frozen=True)
class Enum(DataClassJsonMixin):
    """Represents an enum declared by an interface."""

    name: str
    summary: str | None = None
    description: str | None = None
    since: int | None = None
    entries: list[Entry] = field(default_factory=list, metadata=config(field_name="entry"))

    def __post_init__(self) -> None:
        _check_str(self.name, "enum name")
        _check_optional_u32(self.since, f"enum {self.name}: since")


@dataclass(frozen=True)
class Request(DataClassJsonMixin):
    """Represents a request (client to server message).

    The opcode of a request is its position in the interface's request list.
    """

    name: str
    since: int | None = None
    destructor: bool = False
    summary: str | None = None
    description: str | None = None
    args: list[Arg] = field(default_factory=list, metadata=config(field_name="arg"))

    def __post_init__(self) -> None:
        _check_str(self.name, "request name")
        _check_optional_u32(self.since, f"request {self.name}: since")
        _check_bool(self.destructor, f"request {self.name}: destructor")


@dataclass(frozen=True)
class Event(DataClassJsonMixin):
    """Represents an event (server to client message).

    The opcode of an event is its position in the interface's event list.
    """

    name: str
    since: int | None = None
    summary: str | None = None
    description: str | None = None
    args: list[Arg] = field(default_factory=list, metadata=config(field_name="arg"))

    def __post_init__(self) -> None:
        _check_str(self.name, "event name")
        _check_optional_u32(self.since, f"event {self.name}: since")


@dataclass(frozen=True)
class Interface(DataClassJsonMixin):
    """Represents a named, versioned interface."""

    name: str
    version: int
    summary: str | None = None
    description: str | None = None
    enums: list[Enum] = field(default_factory=list, metadata=config(field_name="enum"))
    requests: list[Request] = field(default_factory=list, metadata=config(field_name="request"))
    events: list[Event] = field(default_factory=list, metadata=config(field_name="event"))

    def __post_init__(self) -> None:
        _check_str(self.name, "interface name")
        _check_u32(self.version, f"interface {self.name}: version")


@dataclass(frozen=True)
class Protocol(DataClassJsonMixin):
    """Represents a complete protocol definition."""

    name: str
    summary: str | None = None
    description: str | None = None
    copyright: str | None = None
    interfaces: list[Interface] = field(
        default_factory=list, metadata=config(field_name="interface")
    )

    def __post_init__(self) -> None:
        _check_str(self.name, "protocol name")
        _check_optional_str(self.summary, "protocol summary")
        _check_optional_str(self.description, "protocol description")
        _check_optional_str(self.copyright, "protocol copyright")


Message = Request | Event
