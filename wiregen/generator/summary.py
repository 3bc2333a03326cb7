"""Opcode and member summaries of protocol definitions."""

from dataclasses import dataclass

from .naming import member_name, type_name
from .typemap import owned_type
from .types import Interface, Message, Protocol


@dataclass(frozen=True)
class MessageInfo:
    """A request or event with its opcode."""

    name: str
    method: str
    opcode: int
    since: int | None
    signature: str
    destructor: bool = False


@dataclass(frozen=True)
class InterfaceInfo:
    """Summary of one interface."""

    name: str
    class_name: str
    version: int
    requests: list[MessageInfo]
    events: list[MessageInfo]
    enums: list[str]


@dataclass(frozen=True)
class ProtocolInfo:
    """Summary of an entire protocol."""

    name: str
    interfaces: list[InterfaceInfo]

    @property
    def request_count(self) -> int:
        return sum(len(i.requests) for i in self.interfaces)

    @property
    def event_count(self) -> int:
        return sum(len(i.events) for i in self.interfaces)


def _signature(message: Message) -> str:
    return ", ".join(f"{member_name(a.name)}: {owned_type(a)}" for a in message.args)


def _summarize_interface(interface: Interface) -> InterfaceInfo:
    requests = [
        MessageInfo(
            name=r.name,
            method=member_name(r.name),
            opcode=opcode,
            since=r.since,
            signature=_signature(r),
            destructor=r.destructor,
        )
        for opcode, r in enumerate(interface.requests)
    ]
    events = [
        MessageInfo(
            name=e.name,
            method=member_name(e.name),
            opcode=opcode,
            since=e.since,
            signature=_signature(e),
        )
        for opcode, e in enumerate(interface.events)
    ]
    return InterfaceInfo(
        name=interface.name,
        class_name=type_name(interface.name),
        version=interface.version,
        requests=requests,
        events=events,
        enums=[type_name(e.name) for e in interface.enums],
    )


def summarize(protocol: Protocol) -> ProtocolInfo:
    """Summarize a protocol: interfaces, versions and the opcode of every message."""
    return ProtocolInfo(
        name=protocol.name,
        interfaces=[_summarize_interface(i) for i in protocol.interfaces],
    )
