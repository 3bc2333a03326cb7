"""Runtime support imported by generated protocol modules."""

from .runtime import Client as Client
from .runtime import DispatchFn as DispatchFn
from .runtime import EventLoop as EventLoop
from .runtime import Interface as Interface
from .runtime import Lease as Lease
from .runtime import Message as Message
from .runtime import Resident as Resident
from .serialization import InternalError as InternalError
from .serialization import InvalidOpcode as InvalidOpcode
from .serialization import MessageCursor as MessageCursor
from .serialization import MessageStream as MessageStream
from .serialization import MissingRequiredArgument as MissingRequiredArgument
from .serialization import Stream as Stream
from .serialization import WireError as WireError
from .serialization import required as required
from .types import Fd as Fd
from .types import Fixed as Fixed
from .types import Id as Id
from .types import NewId as NewId
from .types import WireEnum as WireEnum
