"""Small text, environment and terminal helpers."""

from __future__ import annotations

import enum
import math
import os
import re
import string
import struct
import sys
import tempfile
import time
import uuid
from datetime import datetime
from pathlib import Path

APP_NAME = "chatkit"

CODE_BLOCK_RE = re.compile(r"```\w*(.*)```", re.MULTILINE | re.DOTALL)
THINK_TAG_RE = re.compile(r"^\s*<think>.*?</think>(\s*|$)", re.DOTALL)

_IDEOGRAPHS = "\u3040-\u309f\u3400-\u4dbf\u4e00-\u9fff\uf900-\ufaff"
_KATAKANA = "\u30a0-\u30ff"
_WORD_CHAR = rf"[^\W{_IDEOGRAPHS}{_KATAKANA}]"
_WORD_RE = re.compile(
    rf"[{_IDEOGRAPHS}]"
    rf"|[{_KATAKANA}]+"
    rf"|{_WORD_CHAR}+(?:['.\u2019]{_WORD_CHAR}+)*"
)

_ASCII_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)

_BASE_PALETTE = [
    (0, 0, 0),
    (205, 0, 0),
    (0, 205, 0),
    (205, 205, 0),
    (0, 0, 238),
    (205, 0, 205),
    (0, 205, 205),
    (229, 229, 229),
    (127, 127, 127),
    (255, 0, 0),
    (0, 255, 0),
    (255, 255, 0),
    (92, 92, 255),
    (255, 0, 255),
    (0, 255, 255),
    (255, 255, 255),
]
_CUBE_LEVELS = (0, 95, 135, 175, 215, 255)


class Color(enum.IntEnum):
    """ANSI foreground colour codes."""

    BLACK = 30
    RED = 31
    GREEN = 32
    YELLOW = 33
    BLUE = 34
    PURPLE = 35
    CYAN = 36
    WHITE = 37


def now() -> str:
    """Current local time as RFC 3339 with second precision."""
    return datetime.now().astimezone().isoformat(timespec="seconds")


def now_timestamp() -> int:
    """Current Unix timestamp in seconds."""
    return int(time.time())


def get_env_name(key: str) -> str:
    """Name of the application's environment variable for ``key``."""
    return f"{APP_NAME}_{key}".translate(_ASCII_UPPER)


def normalize_env_name(value: str) -> str:
    """Turn ``value`` into an environment variable name."""
    return value.replace("-", "_").translate(_ASCII_UPPER)


def parse_bool(value: str) -> bool | None:
    """Parse ``1``/``true``/``0``/``false``; anything else gives ``None``."""
    if value in ("1", "true"):
        return True
    if value in ("0", "false"):
        return False
    return None


def _f32(value: float) -> float:
    return struct.unpack("f", struct.pack("f", value))[0]


_ASCII_WORD_WEIGHT = _f32(1.3)


def estimate_token_length(text: str) -> int:
    """Roughly estimate how many tokens ``text`` takes."""
    total = 0.0
    for match in _WORD_RE.finditer(text):
        word = match.group()
        if not any(ch.isalnum() for ch in word):
            continue
        if word.isascii():
            weight = _ASCII_WORD_WEIGHT
        elif len(word) == 1:
            weight = 1.0
        else:
            weight = _f32(float(len(word))) * 0.5
        total = _f32(total + weight)
    return math.ceil(total)


def _rgb_from_ansi256(index: int) -> tuple[int, int, int]:
    if index < 16:
        return _BASE_PALETTE[index]
    if index < 232:
        index -= 16
        return (
            _CUBE_LEVELS[index // 36],
            _CUBE_LEVELS[(index // 6) % 6],
            _CUBE_LEVELS[index % 6],
        )
    level = 8 + 10 * (index - 232)
    return (level, level, level)


def light_theme_from_colorfgbg(colorfgbg: str) -> bool | None:
    """Guess from a ``COLORFGBG`` value whether the terminal background is light."""
    parts = colorfgbg.split(";")
    if len(parts) == 2:
        bg = parts[1]
    elif len(parts) == 3:
        bg = parts[2]
    else:
        return None
    if not re.fullmatch(r"\+?[0-9]+", bg):
        return None
    index = int(bg)
    if index > 255:
        return None
    r, g, b = _rgb_from_ansi256(index)
    return 0.2126 * r + 0.7152 * g + 0.0722 * b > 128.0


def strip_think_tag(text: str) -> str:
    """Remove a leading ``<think>...</think>`` section."""
    return THINK_TAG_RE.sub("", text)


def extract_code_block(text: str) -> str:
    """Return the trimmed contents of a fenced code block, or ``text`` itself."""
    match = CODE_BLOCK_RE.search(text)
    if match is None:
        return text
    return match.group(1).strip()


def convert_option_string(value: str) -> str | None:
    """Map the empty string to ``None``."""
    return value or None


def _causes(err: BaseException) -> list[BaseException]:
    causes: list[BaseException] = []
    seen = {id(err)}
    current = err
    while True:
        following = current.__cause__
        if following is None and not current.__suppress_context__:
            following = current.__context__
        if following is None or id(following) in seen:
            return causes
        seen.add(id(following))
        causes.append(following)
        current = following


def pretty_error(err: BaseException) -> str:
    """Format an exception together with the chain of its causes."""
    output = [f"Error: {err}"]
    causes = _causes(err)
    if causes:
        output.append("\nCaused by:")
        if len(causes) == 1:
            output.append(f"    {indent_text(causes[0], 4).strip()}")
        else:
            output.extend(
                f"{i:5}: {indent_text(cause, 7).strip()}" for i, cause in enumerate(causes)
            )
    return "\n".join(output)


def indent_text(text: object, size: int) -> str:
    """Indent every line of ``text`` by ``size`` spaces."""
    pad = " " * size
    return "\n".join(pad + line for line in str(text).split("\n"))


def _no_color() -> bool:
    value = os.environ.get("NO_COLOR")
    if value is not None and parse_bool(value):
        return True
    isatty = getattr(sys.stdout, "isatty", None)
    return not (isatty is not None and isatty())


def color_text(text: str, color: Color) -> str:
    """Paint ``text`` in ``color`` unless colour output is off."""
    if _no_color():
        return text
    return f"\x1b[{int(color)}m{text}\x1b[0m"


def error_text(text: str) -> str:
    """Paint ``text`` red."""
    return color_text(text, Color.RED)


def warning_text(text: str) -> str:
    """Paint ``text`` yellow."""
    return color_text(text, Color.YELLOW)


def dimmed_text(text: str) -> str:
    """Render ``text`` dimmed unless colour output is off."""
    if _no_color():
        return text
    return f"\x1b[2m{text}\x1b[0m"


def multiline_text(text: str) -> str:
    """Prefix every line after the first with ``.. ``."""
    first, *rest = text.split("\n")
    return "\n".join([first, *(f".. {line}" for line in rest)])


def temp_file(prefix: str, suffix: str) -> Path:
    """A fresh, unique path in the system temporary directory."""
    name = f"{APP_NAME}-{os.getpid()}{prefix}{uuid.uuid4()}{suffix}"
    return Path(tempfile.gettempdir()) / name


def is_url(path: str) -> bool:
    """Whether ``path`` is an http(s) URL."""
    return path.startswith(("http://", "https://"))