"""Python code generator for Wayland protocols."""

import keyword

from jinja2 import Environment, PackageLoader

from .compiler import (
    ArgDecl,
    ArgShape,
    EntryDecl,
    EnumDecl,
    EventDecl,
    InterfaceDecl,
    RequestDecl,
    bind_names,
)
from .types import WireType

DEFAULT_RUNTIME_IMPORT = "wayland_runtime"

# Bindings of the core protocol, imported by extension protocols
DEFAULT_CORE_IMPORT = "wayland_core"

FORMATTER = ["ruff", "format"]

env = Environment(
    loader=PackageLoader("wlscanner.generator", "templates"),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    line_comment_prefix="%%",
    line_statement_prefix="%",
)

header_template = env.get_template("python/header.py.j2")
interface_template = env.get_template("python/interface.py.j2")

# Map wire types to Python type annotations
PRIMITIVE_TYPE_MAP = {
    WireType.INT: "int",
    WireType.UINT: "int",
    WireType.STRING: "str",
    WireType.FD: "int",
    WireType.FIXED: "float",
    WireType.ARRAY: "list[int]",
}

# Map wire types to Event decode methods
DECODE_METHODS = {
    WireType.INT: "int32()",
    WireType.UINT: "uint32()",
    WireType.STRING: "string()",
    WireType.FIXED: "float32()",
    WireType.ARRAY: "array()",
    WireType.FD: "fd()",
}


def _ident(name: str) -> str:
    """Make a schema name usable as a Python identifier."""
    return name + "_" if keyword.iskeyword(name) else name


def _py_type(arg: ArgDecl) -> str:
    """Map an argument to a Python type annotation."""
    if arg.shape in (ArgShape.OBJECT, ArgShape.NEW_OBJECT):
        type_name = arg.interface or "Proxy"
    elif arg.shape in (ArgShape.UNTYPED_OBJECT, ArgShape.BIND):
        type_name = "Proxy"
    else:
        type_name = PRIMITIVE_TYPE_MAP[arg.wire]

    if arg.nullable:
        return f"{type_name} | None"
    return type_name


def _params(req: RequestDecl) -> str:
    """Parameter list of a request method, self included."""
    params = ["self"]
    for arg in req.args:
        if arg.shape == ArgShape.NEW_OBJECT:
            continue
        if arg.shape == ArgShape.BIND:
            interface, version = bind_names(req, arg, "interface", "version")
            params.append(f"{_ident(interface)}: str")
            params.append(f"{_ident(version)}: int")
            params.append(f"{_ident(arg.name)}: Proxy")
        else:
            params.append(f"{_ident(arg.name)}: {_py_type(arg)}")
    return ", ".join(params)


def _returns(req: RequestDecl) -> str:
    if req.returns_object:
        rets = [arg.interface or "Proxy" for arg in req.new_objects]
        return f"tuple[{', '.join(rets)}, Any]"
    return "Any"


def _locals(req: RequestDecl) -> str:
    return ", ".join(_ident(arg.name) for arg in req.new_objects)


def _send_args(req: RequestDecl) -> str:
    """Trailing send_request arguments, in declaration order."""
    args: list[str] = []
    for arg in req.args:
        if arg.shape == ArgShape.BIND:
            interface, version = bind_names(req, arg, "interface", "version")
            args.extend([_ident(interface), _ident(version), _ident(arg.name)])
        else:
            args.append(_ident(arg.name))
    return "".join(f", {a}" for a in args)


def _decode(arg: ArgDecl) -> str:
    """Expression reading one event field from the wire."""
    if arg.shape in (
        ArgShape.OBJECT,
        ArgShape.NEW_OBJECT,
        ArgShape.UNTYPED_OBJECT,
        ArgShape.BIND,
    ):
        return "event.proxy(self.context())"
    return f"event.{DECODE_METHODS[arg.wire]}"


def _handler_type(ev: EventDecl) -> str:
    return f"Callable[[{ev.record}], None]"


def _value(enum: EnumDecl, entry: EntryDecl) -> str:
    if enum.bitfield:
        return f"0x{entry.value:x}"
    return str(entry.value)


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')


def _docstring(summary: str | None, description: str | None, extra: list[str], indent: str) -> str:
    """Render a docstring block from schema documentation."""
    first = f"{summary.strip()}." if summary else "No summary."
    body: list[str] = []
    if description:
        body = [line.strip() for line in description.strip().splitlines()]
    for line in extra:
        body.extend(["", line] if body else [line])

    if not body:
        return f'{indent}"""{_escape(first)}"""'

    lines = [f'{indent}"""{_escape(first)}', ""]
    lines.extend(f"{indent}{_escape(line)}".rstrip() for line in body)
    lines.append(f'{indent}"""')
    return "\n".join(lines)


def _request_doc(req: RequestDecl) -> str:
    extra: list[str] = []
    if req.destructor:
        extra.append("The object must not be used after this request.")
    if req.since > 1:
        extra.append(f"Available since version {req.since}.")
    return _docstring(req.summary, req.description, extra, " " * 8)


def _foreign_references(interfaces: list[InterfaceDecl]) -> list[str]:
    """Classes the module imports from the core bindings, sorted."""
    local = {iface.canonical for iface in interfaces}
    names = {name for iface in interfaces for name in iface.foreign_references}
    return sorted(names - local)


def render_header(
    interfaces: list[InterfaceDecl],
    protocol: str,
    source: str,
    runtime_import: str,
    core_import: str = DEFAULT_CORE_IMPORT,
) -> str:
    """Render the module preamble."""
    return header_template.render(
        protocol=protocol,
        source=source,
        runtime_import=runtime_import,
        core_import=core_import,
        foreign=_foreign_references(interfaces),
        has_events=any(iface.has_events for iface in interfaces),
    )


def render_interface(iface: InterfaceDecl) -> str:
    """Render all declarations of one interface."""
    return interface_template.render(
        iface=iface,
        ident=_ident,
        py_type=_py_type,
        params=_params,
        returns=_returns,
        locals=_locals,
        send_args=_send_args,
        decode=_decode,
        handler_type=_handler_type,
        value=_value,
        docstring=_docstring,
        request_doc=_request_doc,
    )


def render(
    interfaces: list[InterfaceDecl],
    protocol: str,
    source: str,
    runtime_import: str = DEFAULT_RUNTIME_IMPORT,
    core_import: str = DEFAULT_CORE_IMPORT,
) -> list[str]:
    """Render a compiled protocol to Python source chunks, in interface order.

    Interfaces of other protocols are imported from `core_import`.
    """
    chunks = [render_header(interfaces, protocol, source, runtime_import, core_import)]
    chunks.extend(render_interface(iface) for iface in interfaces)
    return chunks
