"""
Tests for rendering records into backend wire text.
"""

from __future__ import annotations

import pytest

from audit_dispatch.encoding import MessageBuffer, encode_nv_string, value_needs_encoding
from audit_dispatch.fields import Backend, string_field, uint64_field


class TestEncodeNvString:
    """The Linux audit name/value convention."""

    def test_safe_value_is_quoted(self) -> None:
        assert encode_nv_string("arg", "eth0") == 'arg="eth0"'

    def test_space_is_hex_encoded(self) -> None:
        assert encode_nv_string("interface", "wl an0") == "interface=776C20616E30"

    def test_quote_is_hex_encoded(self) -> None:
        assert encode_nv_string("name", 'a"b') == "name=612262"

    def test_non_ascii_is_hex_encoded(self) -> None:
        assert encode_nv_string("name", "é") == "name=C3A9"

    def test_empty_value(self) -> None:
        assert encode_nv_string("name", "") == 'name=""'

    @pytest.mark.parametrize("name", ["", "a=b", "a b"])
    def test_unencodable_name(self, name: str) -> None:
        assert encode_nv_string(name, "x") is None

    def test_value_needs_encoding(self) -> None:
        assert not value_needs_encoding("eth0.100")
        assert value_needs_encoding("tab\there")
        assert value_needs_encoding("\x7f")


class TestRenderLog:
    def test_strings_quoted_integers_plain(self) -> None:
        fields = [string_field("op", "up"), uint64_field("ifindex", 3)]
        assert MessageBuffer().render(fields, Backend.LOG) == 'op="up" ifindex=3'

    def test_need_encoding_ignored_for_log(self) -> None:
        fields = [string_field("interface", "wl an0", need_encoding=True)]
        assert MessageBuffer().render(fields, Backend.LOG) == 'interface="wl an0"'

    def test_embedded_quotes_are_not_escaped(self) -> None:
        fields = [string_field("name", 'say "hi"')]
        assert MessageBuffer().render(fields, Backend.LOG) == 'name="say "hi""'

    def test_auditd_only_fields_skipped(self) -> None:
        fields = [
            string_field("op", "up"),
            string_field("secret", "x", backends=Backend.AUDITD),
            string_field("result", "success"),
        ]
        assert MessageBuffer().render(fields, Backend.LOG) == 'op="up" result="success"'

    def test_empty_record(self) -> None:
        assert MessageBuffer().render([], Backend.LOG) == ""


class TestRenderAuditd:
    def test_plain_strings_unquoted(self) -> None:
        fields = [string_field("op", "reload"), string_field("result", "success")]
        text = MessageBuffer().render(fields, Backend.AUDITD, encode_nv_string)
        assert text == "op=reload result=success"

    def test_need_encoding_uses_encoder(self) -> None:
        fields = [string_field("arg", "eth0", need_encoding=True)]
        text = MessageBuffer().render(fields, Backend.AUDITD, encode_nv_string)
        assert text == 'arg="eth0"'

    def test_encoder_failure_renders_placeholder(self, strict_encoder) -> None:
        fields = [
            string_field("op", "up"),
            string_field("interface", "wl an0", need_encoding=True),
        ]
        text = MessageBuffer().render(fields, Backend.AUDITD, strict_encoder)
        assert text == "op=up interface=???"

    def test_raising_encoder_renders_placeholder(self) -> None:
        def raising(name: str, value: str) -> str:
            raise TypeError("embedded null character")

        fields = [
            string_field("op", "reload"),
            string_field("arg", "eth\x000", need_encoding=True),
            uint64_field("pid", 1),
        ]
        text = MessageBuffer().render(fields, Backend.AUDITD, raising)
        assert text == "op=reload arg=??? pid=1"

    def test_missing_encoder_renders_placeholder(self) -> None:
        fields = [string_field("arg", "eth0", need_encoding=True)]
        assert MessageBuffer().render(fields, Backend.AUDITD) == "arg=???"

    def test_never_emits_raw_value_when_encoding_needed(self) -> None:
        fields = [string_field("name", "x y", need_encoding=True)]
        text = MessageBuffer().render(fields, Backend.AUDITD, encode_nv_string)
        assert "x y" not in text

    def test_log_only_fields_skipped(self) -> None:
        fields = [
            string_field("result", "fail"),
            string_field("reason", "denied", backends=Backend.LOG),
        ]
        assert MessageBuffer().render(fields, Backend.AUDITD, encode_nv_string) == "result=fail"

    def test_integers(self) -> None:
        fields = [uint64_field("pid", 100), uint64_field("uid", 0)]
        assert MessageBuffer().render(fields, Backend.AUDITD) == "pid=100 uid=0"


class TestBufferReuse:
    def test_second_render_does_not_leak_previous_text(self) -> None:
        buf = MessageBuffer()
        fields = [
            string_field("op", "a-very-long-operation-name"),
            string_field("reason", "only-in-the-log", backends=Backend.LOG),
        ]
        first = buf.render(fields, Backend.LOG)
        second = buf.render(fields, Backend.AUDITD, encode_nv_string)
        assert first == 'op="a-very-long-operation-name" reason="only-in-the-log"'
        assert second == "op=a-very-long-operation-name"

    def test_shorter_render_after_longer(self) -> None:
        buf = MessageBuffer()
        buf.render([string_field("x", "1" * 100)], Backend.LOG)
        assert buf.render([uint64_field("y", 2)], Backend.LOG) == "y=2"
