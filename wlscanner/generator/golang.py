"""Go code generator for Wayland protocols."""

from jinja2 import Environment, PackageLoader

from .compiler import (
    ArgDecl,
    ArgShape,
    EntryDecl,
    EnumDecl,
    InterfaceDecl,
    RequestDecl,
    bind_names,
)
from .types import WireType

DEFAULT_PACKAGE = "wl"

FORMATTER = ["gofmt", "-w"]

env = Environment(
    loader=PackageLoader("wlscanner.generator", "templates"),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    line_comment_prefix="%%",
    line_statement_prefix="%",
)

header_template = env.get_template("go/header.go.j2")
interface_template = env.get_template("go/interface.go.j2")

# Map wire types to Go types
PRIMITIVE_TYPE_MAP = {
    WireType.INT: "int32",
    WireType.UINT: "uint32",
    WireType.STRING: "string",
    WireType.FD: "uintptr",
    WireType.FIXED: "float32",
    WireType.ARRAY: "[]int32",
}

# Map Go types to Event decode methods (sync with the runtime's event.go)
DECODE_METHODS = {
    "int32": "Int32()",
    "uint32": "Uint32()",
    "string": "String()",
    "float32": "Float32()",
    "[]int32": "Array()",
    "uintptr": "FD()",
}

KEYWORDS = frozenset(
    [
        "break",
        "case",
        "chan",
        "const",
        "continue",
        "default",
        "defer",
        "else",
        "fallthrough",
        "for",
        "func",
        "go",
        "goto",
        "if",
        "import",
        "interface",
        "map",
        "package",
        "range",
        "return",
        "select",
        "struct",
        "switch",
        "type",
        "var",
    ]
)


def _ident(name: str) -> str:
    """Make a schema name usable as a Go parameter or local."""
    return name + "_" if name in KEYWORDS else name


def _primitive(arg: ArgDecl) -> str:
    return PRIMITIVE_TYPE_MAP[arg.wire]


def _go_type(arg: ArgDecl) -> str:
    """Map an argument to its Go type."""
    if arg.shape in (ArgShape.OBJECT, ArgShape.NEW_OBJECT):
        return f"*{arg.interface}"
    if arg.shape in (ArgShape.UNTYPED_OBJECT, ArgShape.BIND):
        return "Proxy"
    if arg.shape == ArgShape.ENUM:
        return arg.enum or ""
    return _primitive(arg)


def _params(req: RequestDecl) -> str:
    """Parameter list of a request method."""
    params: list[str] = []
    for arg in req.args:
        if arg.shape == ArgShape.NEW_OBJECT:
            continue
        if arg.shape == ArgShape.BIND:
            iface, version = bind_names(req, arg, "iface", "version")
            params.append(f"{_ident(iface)} string")
            params.append(f"{_ident(version)} uint32")
            params.append(f"{_ident(arg.name)} Proxy")
        else:
            params.append(f"{_ident(arg.name)} {_go_type(arg)}")
    return ", ".join(params)


def _returns(req: RequestDecl) -> str:
    if req.returns_object:
        rets = [f"*{arg.interface}" for arg in req.new_objects]
        return f"({', '.join(rets)}, error)"
    return "error"


def _locals(req: RequestDecl) -> str:
    return ", ".join(_ident(arg.name) for arg in req.new_objects)


def _send_args(req: RequestDecl) -> str:
    """Trailing sendRequest arguments, in declaration order."""
    args: list[str] = []
    for arg in req.args:
        name = _ident(arg.name)
        if arg.shape == ArgShape.NEW_OBJECT:
            args.append(f"Proxy({name})")
        elif arg.shape == ArgShape.BIND:
            iface, version = bind_names(req, arg, "iface", "version")
            args.extend([_ident(iface), _ident(version), name])
        elif arg.shape == ArgShape.ENUM:
            args.append(f"{_primitive(arg)}({name})")
        else:
            args.append(name)
    return "".join(f", {a}" for a in args)


def _decode(arg: ArgDecl) -> str:
    """Expression reading one event field from the wire."""
    if arg.shape in (ArgShape.OBJECT, ArgShape.NEW_OBJECT):
        return f"event.Proxy(p.Context()).(*{arg.interface})"
    if arg.shape in (ArgShape.UNTYPED_OBJECT, ArgShape.BIND):
        return "event.Proxy(p.Context())"
    method = DECODE_METHODS[_primitive(arg)]
    if arg.shape == ArgShape.ENUM:
        return f"{arg.enum}(event.{method})"
    return f"event.{method}"


def _value(enum: EnumDecl, entry: EntryDecl) -> str:
    if enum.bitfield:
        return f"0x{entry.value:x}"
    return str(entry.value)


def _comment(lines: list[str], indent: str = "") -> str:
    return "\n".join(f"{indent}// {line}".rstrip() for line in lines)


def _reflow(text: str | None) -> list[str]:
    if not text:
        return []
    return [line.strip() for line in text.strip().splitlines()]


def _doc(name: str, verb: str, summary: str | None, description: str | None) -> list[str]:
    lines = [f"{name} {verb} {summary}." if summary else f"{name} {verb} no summary."]
    body = _reflow(description)
    if body:
        lines.append("")
        lines.extend(body)
    return lines


def _request_doc(req: RequestDecl) -> str:
    lines = _doc(req.canonical, "will", req.summary, req.description)
    if req.destructor:
        lines.extend(["", "The object must not be used after this request."])
    if req.since > 1:
        lines.extend(["", f"Available since version {req.since}."])
    return _comment(lines)


def _type_doc(name: str, summary: str | None, description: str | None) -> str:
    return _comment(_doc(name, "is", summary, description))


def render_header(interfaces: list[InterfaceDecl], source: str, package: str) -> str:
    """Render the file preamble."""
    return header_template.render(
        source=source,
        package=package,
        needs_sync=any(iface.has_events for iface in interfaces),
    )


def render_interface(iface: InterfaceDecl) -> str:
    """Render all declarations of one interface."""
    return interface_template.render(
        iface=iface,
        ident=_ident,
        go_type=_go_type,
        params=_params,
        returns=_returns,
        locals=_locals,
        send_args=_send_args,
        decode=_decode,
        value=_value,
        request_doc=_request_doc,
        type_doc=_type_doc,
        comment=_comment,
    )


def render(
    interfaces: list[InterfaceDecl], source: str, package: str = DEFAULT_PACKAGE
) -> list[str]:
    """Render a compiled protocol to Go source chunks, in interface order."""
    chunks = [render_header(interfaces, source, package)]
    chunks.extend(render_interface(iface) for iface in interfaces)
    return chunks
