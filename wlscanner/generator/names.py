"""Canonical names for interfaces, enums and arguments.

Schema names are snake_case and usually carry the protocol namespace
prefix ("wl_"). Generated names are PascalCase with the prefix removed:

  wl_shm_pool      -> ShmPool
  wl_surface.enter -> SurfaceEnterEvent (event record)
  wl_output.transform, entry 90 -> OutputTransform90

Every interface is registered in a first pass over the whole protocol,
so references to interfaces declared later in the document resolve.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .types import Protocol

DEFAULT_PREFIX = "wl_"

# Interfaces of the core protocol. Extension protocols reference these
# without declaring them.
FOREIGN_INTERFACES: tuple[str, ...] = (
    "wl_display",
    "wl_registry",
    "wl_callback",
    "wl_compositor",
    "wl_shm_pool",
    "wl_shm",
    "wl_buffer",
    "wl_data_offer",
    "wl_data_source",
    "wl_data_device",
    "wl_data_device_manager",
    "wl_shell",
    "wl_shell_surface",
    "wl_surface",
    "wl_seat",
    "wl_pointer",
    "wl_keyboard",
    "wl_touch",
    "wl_output",
    "wl_region",
    "wl_subcompositor",
    "wl_subsurface",
)

_SEPARATORS = re.compile(r"[_\-\s]+")


class UnresolvedNameError(RuntimeError):
    """Raised when a reference names something never registered."""


class MalformedReferenceError(RuntimeError):
    """Raised when a qualified enum reference is not "interface.enum"."""


def _segments(name: str, prefix: str) -> list[str]:
    if prefix and name.startswith(prefix):
        name = name[len(prefix) :]
    return [s for s in _SEPARATORS.split(name) if s]


def _title(segment: str) -> str:
    # Digits do not start a new word: "a1b" -> "A1b"
    return segment[:1].upper() + segment[1:]


def camel_case(name: str, prefix: str = DEFAULT_PREFIX) -> str:
    """Convert a schema name to PascalCase, stripping the namespace prefix."""
    return "".join(_title(s) for s in _segments(name, prefix))


def lower_camel_case(name: str, prefix: str = DEFAULT_PREFIX) -> str:
    """Convert a schema name to camelCase, stripping the namespace prefix."""
    segments = _segments(name, prefix)
    if not segments:
        return ""
    return segments[0] + "".join(_title(s) for s in segments[1:])


def split_enum_reference(reference: str) -> tuple[str | None, str]:
    """Split an enum reference into (interface, enum).

    The interface part is None for bare references.
    """
    if "." not in reference:
        return (None, reference)

    parts = reference.split(".")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise MalformedReferenceError(
            f'enum references must have "interface.enum" format, got {reference!r}'
        )
    return (parts[0], parts[1])


class NameRegistry:
    """Maps schema names to generated names.

    Interfaces are keyed by their schema name; enums by
    "interface.enum".
    """

    def __init__(self, prefix: str = DEFAULT_PREFIX) -> None:
        self.prefix = prefix
        self._interfaces: dict[str, str] = {}
        self._enums: dict[str, str] = {}
        self._foreign: set[str] = set()

    def __contains__(self, name: object) -> bool:
        return name in self._interfaces

    def __len__(self) -> int:
        return len(self._interfaces)

    def canonical(self, name: str) -> str:
        return camel_case(name, self.prefix)

    def lower_canonical(self, name: str) -> str:
        return lower_camel_case(name, self.prefix)

    def register_interface(self, name: str, *, foreign: bool = False) -> str:
        """Register an interface name and return its generated name."""
        if name not in self._interfaces:
            self._interfaces[name] = self.canonical(name)
        if foreign:
            self._foreign.add(name)
        else:
            self._foreign.discard(name)
        return self._interfaces[name]

    def register_enum(self, interface: str, enum: str) -> str:
        """Register an enum of a registered interface and return its type name."""
        key = f"{interface}.{enum}"
        if key not in self._enums:
            self._enums[key] = self.resolve(interface) + self.canonical(enum)
        return self._enums[key]

    def is_foreign(self, name: str) -> bool:
        return name in self._foreign

    def resolve(self, name: str) -> str:
        """Return the generated name of a registered interface."""
        try:
            return self._interfaces[name]
        except KeyError:
            raise UnresolvedNameError(f"interface {name!r} was never registered") from None

    def resolve_enum(self, owner: str, reference: str) -> str:
        """Return the generated type name an enum reference points to.

        Bare references are looked up in `owner`. Enums of foreign
        interfaces are trusted to exist in the protocol that declares them.
        """
        interface, enum = split_enum_reference(reference)
        if interface is None:
            interface = owner

        iface_name = self.resolve(interface)
        key = f"{interface}.{enum}"
        if key in self._enums:
            return self._enums[key]
        if self.is_foreign(interface):
            return iface_name + self.canonical(enum)
        raise UnresolvedNameError(f"enum {key!r} was never registered")

    def interfaces(self) -> dict[str, str]:
        return dict(self._interfaces)


def build_registry(protocol: Protocol, prefix: str = DEFAULT_PREFIX) -> NameRegistry:
    """Register every interface and enum of a protocol.

    Protocols other than the core "wayland" protocol also see the core
    interfaces, so they can reference them without declaring them.
    """
    registry = NameRegistry(prefix)

    if protocol.name != "wayland":
        for name in FOREIGN_INTERFACES:
            registry.register_interface(name, foreign=True)

    for iface in protocol.interfaces:
        registry.register_interface(iface.name)

    for iface in protocol.interfaces:
        for enum in iface.enums:
            registry.register_enum(iface.name, enum.name)

    return registry
