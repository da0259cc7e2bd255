"""Wayland protocol binding generator."""

from .compiler import ArgShape as ArgShape
from .compiler import InterfaceDecl as InterfaceDecl
from .compiler import compile_protocol as compile_protocol
from .emitter import DestinationExistsError as DestinationExistsError
from .emitter import EmissionError as EmissionError
from .emitter import Emitter as Emitter
from .names import MalformedReferenceError as MalformedReferenceError
from .names import NameRegistry as NameRegistry
from .names import UnresolvedNameError as UnresolvedNameError
from .names import build_registry as build_registry
from .parser import SchemaError as SchemaError
from .parser import parse as parse
from .source import read_source as read_source
from .types import *
