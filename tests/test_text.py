import io
import sys
import tempfile
import time
from datetime import datetime
from pathlib import Path

import pytest

from chatkit.text import (
    Color,
    color_text,
    convert_option_string,
    dimmed_text,
    error_text,
    estimate_token_length,
    extract_code_block,
    get_env_name,
    indent_text,
    is_url,
    light_theme_from_colorfgbg,
    multiline_text,
    normalize_env_name,
    now,
    now_timestamp,
    parse_bool,
    pretty_error,
    strip_think_tag,
    temp_file,
    warning_text,
)


class _Tty(io.StringIO):
    def isatty(self):
        return True


def test_now_is_rfc3339_with_offset():
    value = now()
    parsed = datetime.fromisoformat(value)
    assert parsed.tzinfo is not None
    assert "." not in value


def test_now_timestamp_is_current():
    assert abs(now_timestamp() - time.time()) < 5


def test_get_env_name_is_uppercase():
    name = get_env_name("shell")
    assert name.endswith("_SHELL")
    assert name == name.upper()
    assert get_env_name("SHELL") == name


def test_normalize_env_name():
    assert normalize_env_name("foo-bar") == "FOO_BAR"


@pytest.mark.parametrize(
    "value, expected",
    [("1", True), ("true", True), ("0", False), ("false", False), ("yes", None), ("TRUE", None)],
)
def test_parse_bool(value, expected):
    assert parse_bool(value) is expected


def test_estimate_token_length_basic():
    assert estimate_token_length("") == 0
    assert estimate_token_length("hello world") == 3


def test_estimate_token_length_grows_with_words():
    short = estimate_token_length("one two")
    longer = estimate_token_length("one two three four")
    assert longer > short
    assert estimate_token_length("hello") == estimate_token_length("world")


def test_estimate_token_length_single_ideograph_weighs_one():
    assert estimate_token_length("中") == 1
    assert estimate_token_length("中 文") == 2


@pytest.mark.parametrize(
    "value, expected",
    [
        ("15;0", False),
        ("0;15", True),
        ("0;default;15", True),
        ("0;231", True),
        ("0;16", False),
        ("0;232", False),
        ("0;255", True),
    ],
)
def test_light_theme_from_colorfgbg(value, expected):
    assert light_theme_from_colorfgbg(value) is expected


@pytest.mark.parametrize("value", ["15", "0;x", "0;300", "1;2;3;4"])
def test_light_theme_from_colorfgbg_invalid(value):
    assert light_theme_from_colorfgbg(value) is None


def test_strip_think_tag():
    assert strip_think_tag("<think>reasoning\nmore</think>\nHello") == "Hello"
    assert strip_think_tag("Hi <think>x</think> there") == "Hi <think>x</think> there"


def test_extract_code_block():
    assert extract_code_block("text\n```rust\nfn main() {}\n```\nafter") == "fn main() {}"
    assert extract_code_block("no block here") == "no block here"


def test_convert_option_string():
    assert convert_option_string("") is None
    assert convert_option_string("abc") == "abc"


def test_pretty_error_without_cause():
    assert pretty_error(ValueError("boom")) == "Error: boom"


def test_pretty_error_single_cause():
    err = ValueError("outer")
    err.__cause__ = RuntimeError("line1\nline2")
    assert pretty_error(err) == "Error: outer\n\nCaused by:\n    line1\n    line2"


def test_pretty_error_multiple_causes():
    top = ValueError("top")
    mid = RuntimeError("mid")
    top.__cause__ = mid
    mid.__cause__ = OSError("low")
    assert pretty_error(top) == "Error: top\n\nCaused by:\n    0: mid\n    1: low"


def test_pretty_error_uses_raise_from():
    try:
        try:
            raise KeyError("inner")
        except KeyError as exc:
            raise ValueError("outer") from exc
    except ValueError as exc:
        text = pretty_error(exc)
    assert text.startswith("Error: outer\n\nCaused by:\n")
    assert "inner" in text


def test_indent_text():
    result = indent_text("a\nb\nc", 3)
    lines = result.split("\n")
    assert len(lines) == 3
    assert all(line.startswith("   ") for line in lines)
    assert [line[3:] for line in lines] == ["a", "b", "c"]


def test_colors_disabled_by_env(monkeypatch):
    monkeypatch.setattr(sys, "stdout", _Tty())
    monkeypatch.setenv("NO_COLOR", "1")
    assert error_text("oops") == "oops"
    assert warning_text("careful") == "careful"
    assert dimmed_text("faint") == "faint"


def test_colors_disabled_when_not_terminal(monkeypatch):
    monkeypatch.setattr(sys, "stdout", io.StringIO())
    monkeypatch.delenv("NO_COLOR", raising=False)
    assert color_text("plain", Color.GREEN) == "plain"


def test_colors_on_terminal(monkeypatch):
    monkeypatch.setattr(sys, "stdout", _Tty())
    monkeypatch.delenv("NO_COLOR", raising=False)
    red = error_text("oops")
    yellow = warning_text("oops")
    assert red.startswith("\x1b[") and red.endswith("\x1b[0m")
    assert "oops" in red
    assert red != yellow
    assert dimmed_text("faint").endswith("faint\x1b[0m")


def test_multiline_text():
    assert multiline_text("a\nb\nc") == "a\n.. b\n.. c"
    assert multiline_text("single") == "single"


def test_temp_file():
    first = temp_file("-output-", ".txt")
    second = temp_file("-output-", ".txt")
    assert first != second
    assert first.parent == Path(tempfile.gettempdir())
    assert "-output-" in first.name
    assert first.name.endswith(".txt")


@pytest.mark.parametrize(
    "path, expected",
    [("http://example.com", True), ("https://example.com", True), ("ftp://x", False), ("file.txt", False)],
)
def test_is_url(path, expected):
    assert is_url(path) is expected