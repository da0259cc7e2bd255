"""wlscanner - Wayland protocol binding generator."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("wlscanner")
except PackageNotFoundError:
    __version__ = "(local)"
