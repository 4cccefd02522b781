"""
Tests for the built-in registry, applied through the engine the way a toolbar would.
"""

import pytest

from mdtoggle.exceptions import InvalidFormat
from mdtoggle.formats import FORMATS, available_formats, get_format
from mdtoggle.models import FormatDescriptor


def _select_all(buffer, text):
    buffer.text = text
    buffer.select_all()


class TestRegistry:
    def test_names(self):
        assert available_formats() == [
            "bold",
            "italic",
            "link",
            "image",
            "header1",
            "header2",
            "header3",
            "code",
            "orderedList",
            "unorderedList",
            "blockquote",
        ]

    def test_registry_is_read_only(self):
        with pytest.raises(TypeError):
            FORMATS["bold"] = FormatDescriptor()

    def test_flags(self):
        assert FORMATS["code"].block and not FORMATS["code"].multiline
        for name in ("orderedList", "unorderedList", "blockquote"):
            assert FORMATS[name].block and FORMATS[name].multiline
        for name in ("bold", "italic", "link", "image", "header1"):
            assert not FORMATS[name].block and not FORMATS[name].multiline

    def test_get_format_by_name_returns_registry_entry(self):
        assert get_format("bold") is FORMATS["bold"]

    def test_get_format_passes_descriptor_through(self):
        fmt = FormatDescriptor(prefix="~~", suffix="~~")
        assert get_format(fmt) is fmt

    def test_get_format_from_mapping(self):
        fmt = get_format({"prefix": "**", "suffix": "**", "multiline": True})
        assert fmt.multiline
        assert fmt.prefix.value == "**"

    def test_unknown_name(self):
        with pytest.raises(InvalidFormat) as excinfo:
            get_format("underline")
        assert excinfo.value.name == "underline"
        assert "underline" in str(excinfo.value)

    def test_invalid_format_is_value_error(self):
        with pytest.raises(ValueError):
            get_format("strike")


class TestInlineFormats:
    def test_bold(self, buffer, editor):
        _select_all(buffer, "Hello World")
        editor.apply_format("bold")
        assert buffer.text == "**Hello World**"

        _select_all(buffer, "**Hello World**")
        editor.remove_format("bold")
        assert buffer.text == "Hello World"

    def test_italic(self, buffer, editor):
        _select_all(buffer, "Hello World")
        editor.apply_format("italic")
        assert buffer.text == "_Hello World_"

        _select_all(buffer, "_Hello World_")
        editor.remove_format("italic")
        assert buffer.text == "Hello World"


class TestLinkAndImage:
    def test_link_format(self, buffer, editor):
        _select_all(buffer, "Hello World")
        editor.apply_format("link", "/example")
        assert buffer.text == "[Hello World](/example)"
        assert buffer.get_selection() == (1, 12)

    def test_link_without_url(self, buffer, editor):
        _select_all(buffer, "Hello")
        editor.apply_format("link")
        assert buffer.text == "[Hello]()"

    def test_link_unformat(self, buffer, editor):
        _select_all(buffer, "[Hello World](/example)")
        editor.remove_format("link")
        assert buffer.text == "Hello World"

    def test_link_unformat_label_only(self, buffer, editor):
        buffer.text = "See [Hello World](/example) now"
        buffer.set_selection(5, 16)
        assert editor.has_format("link")
        editor.remove_format("link")
        assert buffer.text == "See Hello World now"
        assert buffer.get_selection() == (4, 15)

    def test_link_does_not_match_images(self, buffer, editor):
        buffer.text = "![Hello World](/example.png)"
        buffer.set_selection(2, 13)
        assert not editor.has_format("link")
        editor.remove_format("link")
        assert buffer.text == "![Hello World](/example.png)"
        assert not buffer.can_undo

    def test_image(self, buffer, editor):
        _select_all(buffer, "Hello World")
        editor.apply_format("image", "/example.png")
        assert buffer.text == "![Hello World](/example.png)"

        _select_all(buffer, "![Hello World](/example.png)")
        editor.remove_format("image")
        assert buffer.text == "Hello World"

    def test_image_label_selected(self, buffer, editor):
        buffer.text = "![Hello](/x.png)"
        buffer.set_selection(2, 7)
        assert editor.has_format("image")


class TestHeaders:
    @pytest.mark.parametrize("name, marker", [("header1", "# "), ("header2", "## "), ("header3", "### ")])
    def test_format_and_unformat(self, buffer, editor, name, marker):
        _select_all(buffer, "Hello World")
        editor.apply_format(name)
        assert buffer.text == f"{marker}Hello World"

        buffer.select_all()
        editor.remove_format(name)
        assert buffer.text == "Hello World"

    def test_header1_does_not_unformat_header3(self, buffer, editor):
        buffer.text = "### Hello World"
        buffer.set_selection(4, len(buffer.text))
        editor.remove_format("header1")
        assert buffer.text == "### Hello World"

    def test_header3_does_not_unformat_header4(self, buffer, editor):
        buffer.text = "#### Hello World"
        buffer.set_selection(5, len(buffer.text))
        editor.remove_format("header3")
        assert buffer.text == "#### Hello World"

    @pytest.mark.parametrize("start", [3, 4])
    def test_header1_not_detected_inside_header3(self, buffer, editor, start):
        buffer.text = "### Hello"
        buffer.set_selection(start, len(buffer.text))
        assert not editor.has_format("header1")

    def test_header_detected_after_marker(self, buffer, editor):
        buffer.text = "Intro\n\n## Hello"
        buffer.set_selection(10, 15)
        assert editor.has_format("header2")
        assert not editor.has_format("header1")


class TestBlockFormats:
    def test_code(self, buffer, editor):
        _select_all(buffer, "Hello World")
        editor.apply_format("code")
        assert buffer.text == "```\nHello World\n```"

        buffer.select_all()
        editor.remove_format("code")
        assert buffer.text == "Hello World"

    def test_code_in_paragraph(self, buffer, editor):
        buffer.text = "Intro\nx = 1\nOutro"
        buffer.set_selection(6, 11)
        editor.apply_format("code")
        assert buffer.text == "Intro\n\n```\nx = 1\n```\n\nOutro"
        assert buffer.selected_text == "x = 1"

    def test_ordered_list(self, buffer, editor):
        _select_all(buffer, "Hello\nWorld")
        editor.apply_format("orderedList")
        assert buffer.text == "1. Hello\n2. World"

        _select_all(buffer, "1. Hello\n2. World")
        editor.remove_format("orderedList")
        assert buffer.text == "Hello\nWorld"

    def test_ordered_list_multi_digit(self, buffer, editor):
        _select_all(buffer, "\n".join(f"item {n}" for n in range(12)))
        editor.apply_format("orderedList")
        assert buffer.text.splitlines()[-1] == "12. item 11"
        assert editor.has_format("orderedList")

    def test_unordered_list(self, buffer, editor):
        _select_all(buffer, "Hello\nWorld")
        editor.apply_format("unorderedList")
        assert buffer.text == "- Hello\n- World"

        _select_all(buffer, "- Hello\n- World")
        editor.remove_format("unorderedList")
        assert buffer.text == "Hello\nWorld"

    def test_blockquote(self, buffer, editor):
        _select_all(buffer, "Hello\nWorld")
        editor.apply_format("blockquote")
        assert buffer.text == "> Hello\n> World"

        _select_all(buffer, "> Hello\n> World")
        editor.remove_format("blockquote")
        assert buffer.text == "Hello\nWorld"

    def test_partially_quoted_selection_is_not_a_blockquote(self, buffer, editor):
        _select_all(buffer, "> Hello\nWorld")
        assert not editor.has_format("blockquote")
