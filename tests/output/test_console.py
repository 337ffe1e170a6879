"""Tests for the StringIO-backed Rich console."""

from leafpress.output.console import LEAF_THEME, create_console, get_output


def test_renders_to_buffer() -> None:
    console = create_console()
    console.print("[leaf.ok]hello[/leaf.ok]")
    assert get_output(console) == "hello\n"


def test_default_width() -> None:
    assert create_console().width == 120
    assert create_console(width=80).width == 80


def test_theme_styles() -> None:
    assert "leaf.slug" in LEAF_THEME.styles
