"""Runtime contracts for generated interface classes.

The object registry, leases and event loop belong to the hosting runtime.
This module describes what generated code expects of them and provides the
``Interface`` base class every generated interface derives from.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, Protocol, Self, TypeVar

from .serialization import Stream
from .types import Id

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)
C = TypeVar("C")


class Message(Protocol):
    """Header of an incoming message."""

    object_id: Id
    opcode: int


class Lease(Protocol[T_co]):
    """Exclusive access to a registered object for the duration of a dispatch.

    The runtime guarantees at most one lease per object at a time, so
    generated code never synchronizes.
    """

    @property
    def id(self) -> Id: ...

    @property
    def value(self) -> T_co: ...

    def downcast(self, cls: type[T]) -> "Lease[T] | None":
        """Return this lease typed as ``cls``, or None if the object is not one."""
        ...


class Client(Protocol[C]):
    """A connected peer carrying user context of type ``C``."""

    def stream(self) -> Stream: ...


class EventLoop(Protocol[C]):
    """Opaque handle on the runtime's event loop."""


DispatchFn = Callable[[Lease[Any], EventLoop[Any], Client[Any], Message], None]


@dataclass
class Resident(Generic[T]):
    """An object tracked by the runtime together with its dispatch function."""

    id: Id
    dispatch: DispatchFn
    interface: str
    version: int
    value: T


class Interface(ABC):
    """Base class for generated interfaces.

    Generated subclasses define:
        INTERFACE: ClassVar[str]  # interface name on the wire
        VERSION: ClassVar[int]  # highest supported version
        dispatch()  # decodes a request and calls its handler
    """

    INTERFACE: ClassVar[str]
    VERSION: ClassVar[int]

    @classmethod
    @abstractmethod
    def dispatch(
        cls,
        _this: Lease[Any],
        _event_loop: EventLoop[Any],
        _client: Client[Any],
        _message: Message,
    ) -> None:
        """Decode ``_message`` and invoke the matching request handler."""

    def into_object(self, id: Id) -> Resident[Self]:
        """Wrap this object so the runtime can track it at its interface version."""
        return Resident(id, type(self).dispatch, self.INTERFACE, self.VERSION, self)

    def into_versioned_object(self, id: Id, version: int) -> Resident[Self]:
        """Wrap this object so the runtime can track it at the given version."""
        return Resident(id, type(self).dispatch, self.INTERFACE, version, self)
