"""Resolve a schema location to raw bytes."""

import logging
import urllib.error
import urllib.request
from pathlib import Path

from .parser import SchemaError

logger = logging.getLogger(__name__)

DEVEL_SOURCE_URL = "https://gitlab.freedesktop.org/wayland/wayland/-/raw/main/protocol/wayland.xml"
FETCH_TIMEOUT = 30.0


def is_url(location: str) -> bool:
    """Check if a schema location should be fetched over the network."""
    return location.startswith(("http:", "https:"))


def fetch(url: str, timeout: float = FETCH_TIMEOUT) -> bytes:
    """Download a schema over http(s)."""
    logger.debug("Fetching %s", url)
    try:
        with urllib.request.urlopen(url, timeout=timeout) as response:
            return response.read()
    except urllib.error.HTTPError as exc:
        raise SchemaError(f"Cannot get {url}: HTTP {exc.code}") from exc
    except (urllib.error.URLError, TimeoutError) as exc:
        raise SchemaError(f"Cannot get {url}: {exc}") from exc


def read_source(location: str, timeout: float = FETCH_TIMEOUT) -> bytes:
    """Read a schema from a local path or an http(s) URL."""
    if not location:
        raise SchemaError("Must specify a schema source")

    if is_url(location):
        return fetch(location, timeout)

    path = Path(location)
    logger.debug("Reading %s", path)
    try:
        return path.read_bytes()
    except OSError as exc:
        raise SchemaError(f"Cannot open {location}: {exc.strerror or exc}") from exc
