"""Python code generator for wire protocol definitions."""

import json
import logging
import textwrap

from jinja2 import Environment, PackageLoader

from .naming import entry_constant, member_name, title, type_name
from .typemap import REQUIRED, decode, encode, owned_type, transient_type
from .types import Arg, Entry, Enum, Event, Interface, Message, Protocol, Request

log = logging.getLogger(__name__)

env = Environment(
    loader=PackageLoader("wiregen.generator", "templates"),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    line_comment_prefix="%%",
    line_statement_prefix="%",
)

# Parameter names of generated request and event methods
RESERVED_ARGS = frozenset({"this", "event_loop", "client", "cls", "self"})

DEFAULT_RUNTIME_IMPORT = "wiregen.proto"


def _clean(text: str) -> str:
    """Normalize a documentation block from the schema."""
    return textwrap.dedent(text.expandtabs(8).strip("\n")).strip()


def _paragraphs(*parts: str | None) -> str:
    return "\n\n".join(_clean(p) for p in parts if p and p.strip())


def _since(since: int | None) -> str | None:
    return f"`Since version {since}`" if since is not None else None


def _summary(summary: str | None) -> str | None:
    return title(summary) if summary else None


def _args_section(args: list[Arg]) -> str | None:
    lines = [f"    {_arg_name(a)}: {_clean(a.summary)}" for a in args if a.summary]
    if not lines:
        return None
    return "Args:\n" + "\n".join(lines)


def _docstring(text: str, indent: int = 0) -> str:
    """Render ``text`` as a triple-quoted docstring indented by ``indent`` spaces."""
    pad = " " * indent
    text = text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    lines = text.splitlines() or [""]

    if len(lines) == 1:
        line = lines[0]
        if line.endswith('"'):
            head = line[:-1]
            # An odd run of backslashes means the quote is already escaped
            if (len(head) - len(head.rstrip("\\"))) % 2 == 0:
                line = head + '\\"'
        return f'{pad}"""{line}"""'

    body = "\n".join(pad + line if line.strip() else "" for line in lines[1:])
    return f'{pad}"""{lines[0]}\n{body}\n{pad}"""'


def _arg_name(arg: Arg) -> str:
    name = member_name(arg.name)
    if name in RESERVED_ARGS:
        return name + "_"
    return name


def _call_args(request: Request) -> str:
    return ", ".join(["_lease", "_event_loop", "_client"] + [_arg_name(a) for a in request.args])


def _protocol_doc(proto: Protocol) -> str:
    copyright = f"## Copyright\n\n{_clean(proto.copyright)}" if proto.copyright else None
    return _paragraphs(f"# {title(proto.name)}", proto.summary, proto.description, copyright)


def _interface_doc(interface: Interface) -> str:
    return _paragraphs(
        f"`Version {interface.version}`", _summary(interface.summary), interface.description
    )


def _message_doc(message: Message, fallback: str, *notes: str | None) -> str:
    doc = _paragraphs(
        _since(message.since),
        _summary(message.summary),
        message.description,
        *notes,
        _args_section(message.args),
    )
    return doc or fallback


def _request_doc(request: Request) -> str:
    destructor = "This request destroys the object." if request.destructor else None
    return _message_doc(request, f"Handle the `{request.name}` request.", destructor)


def _event_doc(event: Event) -> str:
    return _message_doc(event, f"Send the `{event.name}` event.")


def _enum_doc(enum: Enum) -> str:
    doc = _paragraphs(_since(enum.since), _summary(enum.summary), enum.description)
    return doc or f"The `{enum.name}` enum."


def _entry_comment(entry: Entry) -> list[str]:
    """Lines of the ``#:`` comment documenting an enum entry."""
    return _paragraphs(_since(entry.since), entry.summary, entry.description).splitlines()


def _enum_cases(enum: Enum) -> list[tuple[int, str]]:
    """(value, constant) pairs for rendering; the first entry declared with a value wins."""
    cases: dict[int, str] = {}
    for entry in enum.entries:
        cases.setdefault(entry.value, entry_constant(enum.name, entry.name))
    return list(cases.items())


env.filters["docstring"] = _docstring
template = env.get_template("python.py.j2")


def render(proto: Protocol, runtime_import: str = DEFAULT_RUNTIME_IMPORT) -> str:
    """Render a protocol definition to Python source code.

    Rendering happens entirely in memory; nothing is returned unless the whole
    module was generated.
    """
    log.debug("rendering protocol %s", proto.name)
    for interface in proto.interfaces:
        log.debug(
            "interface %s v%d: %d request(s), %d event(s), %d enum(s)",
            interface.name,
            interface.version,
            len(interface.requests),
            len(interface.events),
            len(interface.enums),
        )

    return template.render(
        proto=proto,
        runtime_import=runtime_import,
        REQUIRED=REQUIRED,
        type_name=type_name,
        member_name=member_name,
        entry_constant=entry_constant,
        arg_name=_arg_name,
        call_args=_call_args,
        owned_type=owned_type,
        transient_type=transient_type,
        decode=decode,
        encode=encode,
        quote=json.dumps,
        protocol_doc=_protocol_doc,
        interface_doc=_interface_doc,
        request_doc=_request_doc,
        event_doc=_event_doc,
        enum_doc=_enum_doc,
        entry_comment=_entry_comment,
        enum_cases=_enum_cases,
        BLANK_LINE="",
    )
