"""Tests for protocol parser."""

import pytest
from pytest import raises

from wlscanner.generator import parse
from wlscanner.generator.parser import SchemaError, parse_value
from wlscanner.generator.types import WireType


def describe_parse_protocol():
    def parses_interfaces_in_order(expect, core_protocol):
        expect(core_protocol.name) == "wayland"
        expect([i.name for i in core_protocol.interfaces]) == [
            "wl_display",
            "wl_registry",
            "wl_callback",
            "wl_compositor",
            "wl_surface",
            "wl_buffer",
            "wl_output",
        ]

    def keeps_copyright(expect, core_protocol):
        expect("Kristian" in core_protocol.copyright) == True

    def parses_interface_attributes(expect, core_protocol):
        compositor = core_protocol.interfaces[3]
        expect(compositor.version) == 6
        expect(compositor.summary) == "the compositor singleton"
        expect(compositor.description) == "A compositor.  This object is a singleton global."

    def keeps_request_and_event_order(expect, core_protocol):
        surface = core_protocol.interfaces[4]
        expect([r.name for r in surface.requests]) == [
            "destroy",
            "attach",
            "frame",
            "set_buffer_transform",
        ]
        expect([e.name for e in surface.events]) == ["enter", "leave"]

    def parses_request_attributes(expect, core_protocol):
        surface = core_protocol.interfaces[4]
        expect(surface.requests[0].destructor) == True
        expect(surface.requests[1].destructor) == False
        expect(surface.requests[3].since) == 2
        expect(surface.requests[1].since) == 1

    def parses_args(expect, core_protocol):
        attach = core_protocol.interfaces[4].requests[1]
        buffer, x, _ = attach.args
        expect(buffer.name) == "buffer"
        expect(buffer.type) == WireType.OBJECT
        expect(buffer.interface) == "wl_buffer"
        expect(buffer.allow_null) == True
        expect(x.type) == WireType.INT
        expect(x.interface) == None
        expect(x.allow_null) == False

    def parses_enum_references(expect, core_protocol):
        transform = core_protocol.interfaces[4].requests[3].args[0]
        expect(transform.enum) == "wl_output.transform"
        flags = core_protocol.interfaces[6].events[0].args[0]
        expect(flags.enum) == "mode"

    def parses_new_id_without_interface(expect, core_protocol):
        bind = core_protocol.interfaces[1].requests[0]
        expect(bind.args[1].type) == WireType.NEW_ID
        expect(bind.args[1].interface) == None

    def parses_enums(expect, core_protocol):
        output = core_protocol.interfaces[6]
        transform, mode = output.enums
        expect(transform.bitfield) == False
        expect([e.name for e in transform.entries]) == ["normal", "90", "180", "270"]
        expect(mode.bitfield) == True
        expect(mode.entries[1].value) == 2
        expect(mode.entries[1].literal) == "0x2"

    def parses_interface_without_members(expect, protocol_xml):
        proto = parse(protocol_xml('<interface name="wl_empty" version="3"/>'))
        expect(proto.interfaces[0].requests) == []
        expect(proto.interfaces[0].events) == []
        expect(proto.interfaces[0].enums) == []

    def accepts_text_input(expect, protocol_xml):
        proto = parse(protocol_xml('<interface name="wl_a" version="1"/>'))
        expect(proto.interfaces[0].name) == "wl_a"


def describe_parse_value():
    @pytest.mark.parametrize(
        "literal, value",
        [
            ("0", 0),
            ("42", 42),
            ("0x1f", 31),
            ("0X10", 16),
            ("0b101", 5),
            ("0o17", 15),
            ("010", 10),
            (" 7 ", 7),
        ],
    )
    def parses_integer_literals(expect, literal, value):
        expect(parse_value(literal)) == value

    def rejects_non_integers():
        with raises(SchemaError):
            parse_value("one")
        with raises(SchemaError):
            parse_value("1.5")


def describe_schema_errors():
    def rejects_malformed_xml():
        with raises(SchemaError):
            parse("<protocol name='x'><interface>")

    def rejects_wrong_root(expect):
        with raises(SchemaError) as exc:
            parse('<interface name="wl_a" version="1"/>')
        expect("<protocol>" in str(exc.value)) == True

    def requires_protocol_name():
        with raises(SchemaError):
            parse("<protocol/>")

    def requires_interface_version(expect, protocol_xml):
        with raises(SchemaError) as exc:
            parse(protocol_xml('<interface name="wl_a"/>'))
        expect("version" in str(exc.value)) == True

    def rejects_non_positive_version(protocol_xml):
        with raises(SchemaError):
            parse(protocol_xml('<interface name="wl_a" version="0"/>'))
        with raises(SchemaError):
            parse(protocol_xml('<interface name="wl_a" version="two"/>'))

    def requires_arg_type(protocol_xml):
        with raises(SchemaError):
            parse(
                protocol_xml(
                    '<interface name="wl_a" version="1">'
                    '<request name="r"><arg name="x"/></request>'
                    "</interface>"
                )
            )

    def rejects_unknown_arg_type(expect, protocol_xml):
        with raises(SchemaError) as exc:
            parse(
                protocol_xml(
                    '<interface name="wl_a" version="1">'
                    '<event name="e"><arg name="x" type="double"/></event>'
                    "</interface>"
                )
            )
        expect("double" in str(exc.value)) == True
        expect("new_id" in str(exc.value)) == True

    def rejects_bad_entry_value(protocol_xml):
        with raises(SchemaError):
            parse(
                protocol_xml(
                    '<interface name="wl_a" version="1">'
                    '<enum name="e"><entry name="x" value="abc"/></enum>'
                    "</interface>"
                )
            )

    def rejects_duplicate_interfaces(expect, protocol_xml):
        with raises(SchemaError) as exc:
            parse(
                protocol_xml(
                    '<interface name="wl_a" version="1"/><interface name="wl_a" version="2"/>'
                )
            )
        expect("wl_a" in str(exc.value)) == True

    def rejects_duplicate_enums(protocol_xml):
        with raises(SchemaError):
            parse(
                protocol_xml(
                    '<interface name="wl_a" version="1">'
                    '<enum name="e"/><enum name="e"/>'
                    "</interface>"
                )
            )
