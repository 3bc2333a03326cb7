"""wiregen protocol code generator."""

from .parser import MalformedSchemaError as MalformedSchemaError
from .parser import SchemaEncodingError as SchemaEncodingError
from .parser import SchemaError as SchemaError
from .parser import SchemaIOError as SchemaIOError
from .parser import ValidationError as ValidationError
from .parser import check_compat as check_compat
from .parser import load as load
from .parser import loads as loads
from .parser import validate as validate
from .summary import InterfaceInfo as InterfaceInfo
from .summary import MessageInfo as MessageInfo
from .summary import ProtocolInfo as ProtocolInfo
from .summary import summarize as summarize
from .types import *
