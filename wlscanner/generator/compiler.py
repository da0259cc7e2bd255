"""Compile the protocol IR into target-neutral declarations.

Every interface is compiled before anything is rendered, so a bad
reference anywhere aborts the run without producing partial output.
"""

from dataclasses import dataclass
from enum import StrEnum, auto
from typing import assert_never

from .names import NameRegistry
from .types import Arg, Entry, Enum, Event, Interface, Protocol, Request, WireType


class ArgShape(StrEnum):
    """How an argument surfaces in generated code."""

    PRIMITIVE = auto()  # plain value, mapped through the wire type table
    ENUM = auto()  # int/uint typed as an enum
    OBJECT = auto()  # reference to an object of a known interface
    UNTYPED_OBJECT = auto()  # reference to an object of any interface
    NEW_OBJECT = auto()  # object created by the request
    BIND = auto()  # caller supplies interface name, version and object


@dataclass(frozen=True)
class ArgDecl:
    name: str
    canonical: str  # PascalCase field name
    wire: WireType
    shape: ArgShape
    interface: str | None  # generated interface name
    enum: str | None  # generated enum type name
    nullable: bool
    summary: str | None
    foreign: bool = False  # interface is declared by another protocol


@dataclass(frozen=True)
class RequestDecl:
    name: str
    canonical: str
    opcode: int
    args: tuple[ArgDecl, ...]
    destructor: bool
    since: int
    summary: str | None
    description: str | None

    @property
    def new_objects(self) -> tuple[ArgDecl, ...]:
        """Args whose objects the request constructs and returns."""
        return tuple(a for a in self.args if a.shape == ArgShape.NEW_OBJECT)

    @property
    def returns_object(self) -> bool:
        return bool(self.new_objects)


@dataclass(frozen=True)
class EventDecl:
    name: str
    canonical: str
    handlers: str  # camelCase stem of the handler list
    record: str  # event record type name
    opcode: int
    args: tuple[ArgDecl, ...]
    since: int
    summary: str | None
    description: str | None


@dataclass(frozen=True)
class EntryDecl:
    name: str
    constant: str
    value: int
    literal: str
    summary: str | None


@dataclass(frozen=True)
class EnumDecl:
    name: str
    canonical: str  # generated type name, interface name included
    bitfield: bool
    entries: tuple[EntryDecl, ...]
    summary: str | None
    description: str | None


@dataclass(frozen=True)
class InterfaceDecl:
    name: str
    canonical: str
    version: int
    requests: tuple[RequestDecl, ...]
    events: tuple[EventDecl, ...]
    enums: tuple[EnumDecl, ...]
    summary: str | None
    description: str | None

    @property
    def has_events(self) -> bool:
        return bool(self.events)

    @property
    def foreign_references(self) -> tuple[str, ...]:
        """Generated names of other protocols' interfaces this one uses."""
        names: list[str] = []
        for member in (*self.requests, *self.events):
            for arg in member.args:
                if arg.foreign and arg.interface and arg.interface not in names:
                    names.append(arg.interface)
        return tuple(names)


def bind_names(req: RequestDecl, arg: ArgDecl, interface: str, version: str) -> tuple[str, str]:
    """Names of the interface and version parameters a late-bound arg expands to.

    Falls back to names derived from the arg when another arg of the
    request already uses one of the preferred names.
    """
    taken = {a.name for a in req.args if a is not arg}
    if interface in taken or version in taken:
        return (f"{arg.name}_interface", f"{arg.name}_version")
    return (interface, version)


def classify(arg: Arg) -> ArgShape:
    """Decide how an argument is exposed.

    new_id without an interface (wl_registry.bind) is checked first: it
    is the one shape where the caller, not the request, creates the object.
    """
    wire = arg.type
    if wire == WireType.NEW_ID:
        return ArgShape.NEW_OBJECT if arg.interface else ArgShape.BIND
    if wire == WireType.OBJECT:
        return ArgShape.OBJECT if arg.interface else ArgShape.UNTYPED_OBJECT
    if wire in (WireType.INT, WireType.UINT):
        return ArgShape.ENUM if arg.enum else ArgShape.PRIMITIVE
    if wire in (WireType.STRING, WireType.FD, WireType.FIXED, WireType.ARRAY):
        return ArgShape.PRIMITIVE
    assert_never(wire)


def compile_arg(arg: Arg, owner: Interface, registry: NameRegistry) -> ArgDecl:
    shape = classify(arg)

    interface = None
    foreign = False
    if shape in (ArgShape.OBJECT, ArgShape.NEW_OBJECT):
        interface = registry.resolve(arg.interface or "")
        foreign = registry.is_foreign(arg.interface or "")

    enum = None
    if shape == ArgShape.ENUM:
        enum = registry.resolve_enum(owner.name, arg.enum or "")

    return ArgDecl(
        name=arg.name,
        canonical=registry.canonical(arg.name),
        wire=arg.type,
        shape=shape,
        interface=interface,
        enum=enum,
        nullable=arg.allow_null,
        summary=arg.summary,
        foreign=foreign,
    )


def compile_request(
    req: Request, opcode: int, owner: Interface, registry: NameRegistry
) -> RequestDecl:
    return RequestDecl(
        name=req.name,
        canonical=registry.canonical(req.name),
        opcode=opcode,
        args=tuple(compile_arg(a, owner, registry) for a in req.args),
        destructor=req.destructor,
        since=req.since,
        summary=req.summary,
        description=req.description,
    )


def compile_event(ev: Event, opcode: int, owner: Interface, registry: NameRegistry) -> EventDecl:
    canonical = registry.canonical(ev.name)
    return EventDecl(
        name=ev.name,
        canonical=canonical,
        handlers=registry.lower_canonical(ev.name),
        record=registry.resolve(owner.name) + canonical + "Event",
        opcode=opcode,
        args=tuple(compile_arg(a, owner, registry) for a in ev.args),
        since=ev.since,
        summary=ev.summary,
        description=ev.description,
    )


def compile_entry(entry: Entry, enum_name: str, registry: NameRegistry) -> EntryDecl:
    return EntryDecl(
        name=entry.name,
        constant=enum_name + registry.canonical(entry.name),
        value=entry.value,
        literal=entry.literal,
        summary=entry.summary,
    )


def compile_enum(enum: Enum, owner: Interface, registry: NameRegistry) -> EnumDecl:
    canonical = registry.register_enum(owner.name, enum.name)
    return EnumDecl(
        name=enum.name,
        canonical=canonical,
        bitfield=enum.bitfield,
        entries=tuple(compile_entry(e, canonical, registry) for e in enum.entries),
        summary=enum.summary,
        description=enum.description,
    )


def compile_interface(iface: Interface, registry: NameRegistry) -> InterfaceDecl:
    """Compile one interface. Opcodes are list positions."""
    return InterfaceDecl(
        name=iface.name,
        canonical=registry.resolve(iface.name),
        version=iface.version,
        requests=tuple(
            compile_request(r, opcode, iface, registry) for opcode, r in enumerate(iface.requests)
        ),
        events=tuple(
            compile_event(e, opcode, iface, registry) for opcode, e in enumerate(iface.events)
        ),
        enums=tuple(compile_enum(e, iface, registry) for e in iface.enums),
        summary=iface.summary,
        description=iface.description,
    )


def compile_protocol(protocol: Protocol, registry: NameRegistry) -> list[InterfaceDecl]:
    """Compile all interfaces of a protocol, in declaration order."""
    return [compile_interface(iface, registry) for iface in protocol.interfaces]
