"""Unit tests configuration file."""

import os

import pytest

from wlscanner.generator import parse

FIXTURE_DIR = os.path.join(os.path.dirname(os.path.realpath(__file__)), "generator")


def pytest_configure(config):
    """Disable verbose output when running tests."""
    terminal = config.pluginmanager.getplugin("terminal")
    if terminal:
        terminal.TerminalReporter.showfspath = False


@pytest.fixture
def protocol_xml():
    """Wrap interface declarations in a <protocol> document."""

    def wrap(body, name="wayland"):
        return f'<?xml version="1.0"?>\n<protocol name="{name}">\n{body}\n</protocol>\n'

    return wrap


@pytest.fixture
def core_path():
    return os.path.join(FIXTURE_DIR, "core.xml")


@pytest.fixture
def xdg_path():
    return os.path.join(FIXTURE_DIR, "xdg_shell.xml")


@pytest.fixture
def dmabuf_path():
    return os.path.join(FIXTURE_DIR, "linux_dmabuf.xml")


@pytest.fixture
def core_protocol(core_path):
    with open(core_path, "rb") as f:
        return parse(f.read())
