"""Protocol definition parser for Wayland XML schemas."""

import re
import xml.etree.ElementTree as ET
from typing import TypeVar

from .types import Arg, Entry, Enum, Event, Interface, Protocol, Request, WireType, wire_types


class SchemaError(RuntimeError):
    """Raised when a schema is unreachable or structurally invalid."""


_LEGACY_DECIMAL = re.compile(r"^0[0-9]+$")

T = TypeVar("T")


def _require(node: ET.Element, attr: str) -> str:
    value = node.get(attr)
    if value is None or value.strip() == "":
        name = node.get("name")
        where = f"<{node.tag} name={name!r}>" if name else f"<{node.tag}>"
        raise SchemaError(f"{where} is missing required attribute '{attr}'")
    return value.strip()


def _positive_int(node: ET.Element, attr: str, default: int | None = None) -> int:
    raw = node.get(attr)
    if raw is None:
        if default is not None:
            return default
        raw = _require(node, attr)
    try:
        value = int(raw.strip())
    except ValueError as exc:
        raise SchemaError(f"<{node.tag} name={node.get('name')!r}> has non-integer {attr}") from exc
    if value < 1:
        raise SchemaError(f"<{node.tag} name={node.get('name')!r}> must have {attr} >= 1")
    return value


def _flag(node: ET.Element, attr: str) -> bool:
    return (node.get(attr) or "").strip().lower() == "true"


def _description(node: ET.Element) -> tuple[str | None, str | None]:
    """Return (summary, text) of a <description> child."""
    desc = node.find("description")
    if desc is None:
        return (None, None)
    text = (desc.text or "").strip()
    return (desc.get("summary"), text or None)


def parse_value(literal: str) -> int:
    """Parse an enum entry literal.

    Accepts plain decimal, 0x/0o/0b prefixed literals and C style
    leading-zero decimals such as "01".
    """
    text = literal.strip()
    try:
        return int(text, 0)
    except ValueError:
        if _LEGACY_DECIMAL.match(text):
            return int(text, 10)
        raise SchemaError(f"invalid integer literal {literal!r}") from None


def _arg(node: ET.Element) -> Arg:
    raw_type = _require(node, "type")
    try:
        wire = WireType(raw_type)
    except ValueError:
        raise SchemaError(
            f"<arg name={node.get('name')!r}> has unknown type {raw_type!r}, "
            f"expected one of: {', '.join(wire_types())}"
        ) from None

    return Arg(
        name=_require(node, "name"),
        type=wire,
        interface=node.get("interface") or None,
        enum=node.get("enum") or None,
        allow_null=_flag(node, "allow-null"),
        summary=node.get("summary"),
    )


def _entry(node: ET.Element) -> Entry:
    literal = _require(node, "value")
    return Entry(
        name=_require(node, "name"),
        value=parse_value(literal),
        literal=literal,
        since=_positive_int(node, "since", 1),
        summary=node.get("summary"),
    )


def _enum(node: ET.Element) -> Enum:
    summary, description = _description(node)
    return Enum(
        name=_require(node, "name"),
        entries=[_entry(e) for e in node.findall("entry")],
        bitfield=_flag(node, "bitfield"),
        since=_positive_int(node, "since", 1),
        summary=summary,
        description=description,
    )


def _request(node: ET.Element) -> Request:
    summary, description = _description(node)
    return Request(
        name=_require(node, "name"),
        args=[_arg(a) for a in node.findall("arg")],
        destructor=(node.get("type") or "").strip() == "destructor",
        since=_positive_int(node, "since", 1),
        summary=summary,
        description=description,
    )


def _event(node: ET.Element) -> Event:
    summary, description = _description(node)
    return Event(
        name=_require(node, "name"),
        args=[_arg(a) for a in node.findall("arg")],
        since=_positive_int(node, "since", 1),
        summary=summary,
        description=description,
    )


def _interface(node: ET.Element) -> Interface:
    summary, description = _description(node)
    return Interface(
        name=_require(node, "name"),
        version=_positive_int(node, "version"),
        requests=[_request(r) for r in node.findall("request")],
        events=[_event(e) for e in node.findall("event")],
        enums=[_enum(e) for e in node.findall("enum")],
        summary=summary,
        description=description,
    )


def _duplicates(names: list[T]) -> list[T]:
    seen: set[T] = set()
    dups: list[T] = []
    for name in names:
        if name in seen and name not in dups:
            dups.append(name)
        seen.add(name)
    return dups


def validate(protocol: Protocol) -> None:
    """Validate structural invariants of a parsed protocol."""
    dups = _duplicates([iface.name for iface in protocol.interfaces])
    if dups:
        raise SchemaError(f"Interface declared more than once: {', '.join(dups)}")

    for iface in protocol.interfaces:
        dups = _duplicates([enum.name for enum in iface.enums])
        if dups:
            raise SchemaError(f"{iface.name} declares enum more than once: {', '.join(dups)}")


def parse(data: bytes | str) -> Protocol:
    """Parse a protocol XML document into a Protocol."""
    try:
        root = ET.fromstring(data)
    except ET.ParseError as exc:
        raise SchemaError(f"Cannot decode protocol XML: {exc}") from exc

    if root.tag != "protocol":
        raise SchemaError(f"Expected <protocol> root element, found <{root.tag}>")

    copyright_node = root.find("copyright")
    copyright_text = (copyright_node.text or "").strip() if copyright_node is not None else ""

    protocol = Protocol(
        name=_require(root, "name"),
        interfaces=[_interface(i) for i in root.findall("interface")],
        copyright=copyright_text or None,
    )

    validate(protocol)

    return protocol
