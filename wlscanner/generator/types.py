"""Type definitions for the protocol intermediate representation."""

from dataclasses import dataclass, field
from enum import StrEnum

from dataclasses_json import DataClassJsonMixin


class WireType(StrEnum):
    """Wire types an argument may carry."""

    INT = "int"
    UINT = "uint"
    STRING = "string"
    FD = "fd"
    FIXED = "fixed"
    ARRAY = "array"
    OBJECT = "object"
    NEW_ID = "new_id"


@dataclass
class Arg(DataClassJsonMixin):
    """Represents a request or event argument.

    - interface: referenced interface for object/new_id args, if any
    - enum: bare enum name of the owning interface, or "interface.enum"
    """

    name: str
    type: WireType
    interface: str | None = None
    enum: str | None = None
    allow_null: bool = False
    summary: str | None = None


@dataclass
class Entry(DataClassJsonMixin):
    """Represents a single enum entry.

    `literal` keeps the value text exactly as written in the schema.
    """

    name: str
    value: int
    literal: str
    since: int = 1
    summary: str | None = None


@dataclass
class Enum(DataClassJsonMixin):
    """Represents an enum definition."""

    name: str
    entries: list[Entry] = field(default_factory=list)
    bitfield: bool = False
    since: int = 1
    summary: str | None = None
    description: str | None = None


@dataclass
class Request(DataClassJsonMixin):
    """Represents a client to server call."""

    name: str
    args: list[Arg] = field(default_factory=list)
    destructor: bool = False
    since: int = 1
    summary: str | None = None
    description: str | None = None


@dataclass
class Event(DataClassJsonMixin):
    """Represents a server to client notification."""

    name: str
    args: list[Arg] = field(default_factory=list)
    since: int = 1
    summary: str | None = None
    description: str | None = None


@dataclass
class Interface(DataClassJsonMixin):
    """Represents an interface definition.

    The index of a request (or event) in its list is its wire opcode.
    """

    name: str
    version: int
    requests: list[Request] = field(default_factory=list)
    events: list[Event] = field(default_factory=list)
    enums: list[Enum] = field(default_factory=list)
    summary: str | None = None
    description: str | None = None


@dataclass
class Protocol(DataClassJsonMixin):
    """Represents a complete protocol definition."""

    name: str
    interfaces: list[Interface] = field(default_factory=list)
    copyright: str | None = None


def wire_types() -> list[str]:
    """Return a list of wire type names."""
    return [t.value for t in WireType]
