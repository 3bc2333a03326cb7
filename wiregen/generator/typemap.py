"""Mapping of wire data types to Python types and marshalling calls.

Every function here matches over all of ``DataType`` and ends in
``assert_never``, so a new wire type fails type checking at each site until it
is handled there.
"""

import json
from dataclasses import dataclass
from typing import assert_never

from .types import Arg, DataType

# Name under which generated modules import ``wiregen.proto.required``
REQUIRED = "_required"


@dataclass(frozen=True)
class WireMapping:
    """Everything the emitter needs to know about one argument."""

    owned: str
    transient: str
    decode: str
    encode: str


def owned_type(arg: Arg) -> str:
    """Type of a decoded argument, as passed to a request handler."""
    match arg.type:
        case DataType.INT | DataType.UINT:
            return "int"
        case DataType.FIXED:
            return "Fixed"
        case DataType.STRING:
            return "str | None" if arg.nullable else "str"
        case DataType.ARRAY:
            return "bytes"
        case DataType.FD:
            return "Fd"
        case DataType.OBJECT:
            return "Id | None" if arg.nullable else "Id"
        case DataType.NEW_ID:
            return "Id" if arg.is_pinned else "NewId"
        case _:
            assert_never(arg.type)


def transient_type(arg: Arg) -> str:
    """Type accepted by an event sender; buffers are accepted without copying."""
    match arg.type:
        case DataType.INT | DataType.UINT:
            return "int"
        case DataType.FIXED:
            return "Fixed"
        case DataType.STRING:
            return "str | None" if arg.nullable else "str"
        case DataType.ARRAY:
            return "bytes | bytearray | memoryview"
        case DataType.FD:
            return "Fd"
        case DataType.OBJECT:
            return "Id | None" if arg.nullable else "Id"
        case DataType.NEW_ID:
            return "Id" if arg.is_pinned else "NewId"
        case _:
            assert_never(arg.type)


def _required(call: str, arg: Arg) -> str:
    return f"{REQUIRED}({call}, {json.dumps(arg.name)})"


def decode(arg: Arg, cursor: str) -> str:
    """Expression reading ``arg`` from the message cursor named ``cursor``."""
    match arg.type:
        case DataType.INT:
            return f"{cursor}.int32()"
        case DataType.UINT:
            return f"{cursor}.uint32()"
        case DataType.FIXED:
            return f"{cursor}.fixed()"
        case DataType.STRING:
            if arg.nullable:
                return f"{cursor}.string()"
            return _required(f"{cursor}.string()", arg)
        case DataType.ARRAY:
            return f"{cursor}.bytes()"
        case DataType.FD:
            return f"{cursor}.fd()"
        case DataType.OBJECT:
            if arg.nullable:
                return f"{cursor}.object()"
            return _required(f"{cursor}.object()", arg)
        case DataType.NEW_ID:
            if arg.is_pinned:
                return _required(f"{cursor}.object()", arg)
            return f"{cursor}.new_id()"
        case _:
            assert_never(arg.type)


def encode(arg: Arg, stream: str, value: str) -> str:
    """Statement writing the variable ``value`` to the message stream named ``stream``."""
    match arg.type:
        case DataType.INT:
            return f"{stream}.send_int32({value})"
        case DataType.UINT:
            return f"{stream}.send_uint32({value})"
        case DataType.FIXED:
            return f"{stream}.send_fixed({value})"
        case DataType.STRING:
            return f"{stream}.send_string({value})"
        case DataType.ARRAY:
            return f"{stream}.send_bytes({value})"
        case DataType.FD:
            return f"{stream}.send_fd({value})"
        case DataType.OBJECT:
            return f"{stream}.send_object({value})"
        case DataType.NEW_ID:
            if arg.is_pinned:
                return f"{stream}.send_object({value})"
            return f"{stream}.send_new_id({value})"
        case _:
            assert_never(arg.type)


def mapping(
    arg: Arg, cursor: str = "_stream", stream: str = "_stream", value: str = "value"
) -> WireMapping:
    """Collect the four mapping artifacts of ``arg``."""
    return WireMapping(
        owned=owned_type(arg),
        transient=transient_type(arg),
        decode=decode(arg, cursor),
        encode=encode(arg, stream, value),
    )
