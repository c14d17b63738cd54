"""Path joining, glob expansion and file-listing helpers."""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path, PurePath


def safe_join_path(base_path: str | os.PathLike, sub_path: str | os.PathLike) -> Path | None:
    """Join ``sub_path`` under ``base_path``, refusing absolute or escaping paths."""
    sub = PurePath(sub_path)
    if sub.anchor or ".." in sub.parts:
        return None
    return Path(base_path).joinpath(*sub.parts)


def _find(text: str, *needles: str) -> int | None:
    for needle in needles:
        index = text.find(needle)
        if index >= 0:
            return index
    return None


def _locate_glob(path: str) -> tuple[int, int, bool] | None:
    start = _find(path, "/**/*.", "\\**\\*.")
    if start is not None:
        return start, 6, False
    start = _find(path, "**/*.", "**\\*.")
    if start is not None:
        return (start, 5, False) if start == 0 else None
    start = _find(path, "/*.", "\\*.")
    if start is not None:
        return start, 3, True
    return (0, 2, True) if path.find("*.") == 0 else None


def parse_glob(path: str) -> tuple[str, list[str] | None, bool]:
    """Split a glob into its base path, extensions and whether it is non-recursive."""
    located = _locate_glob(path)
    if located is None:
        if path.endswith(("/**", "\\**")):
            return path[:-3], None, False
        return path, None, False

    start, offset, current_only = located
    base_path = path[:start] or ("/" if path.startswith("/") else ".")

    brace = path.find("}", start)
    if brace >= 0:
        spec = path[start + offset : brace + 1]
        if not (spec.startswith("{") and spec.endswith("}")):
            raise ValueError(f"Invalid path '{path}'")
        extensions = spec[1:-1].split(",")
    else:
        extensions = [path[start + offset :]]
    return base_path, extensions or None, current_only


def _extension(path: str | os.PathLike) -> str | None:
    name = PurePath(path).name
    if not name or name == "..":
        return None
    before, dot, after = name.rpartition(".")
    if not dot or not before:
        return None
    return after


def _add_file(files: dict[str, None], suffixes: list[str] | None, path: str) -> None:
    if suffixes:
        extension = _extension(path)
        if extension is None or extension not in suffixes:
            return
    files.setdefault(path, None)


def _list_files(
    files: dict[str, None],
    entry_path: str,
    suffixes: list[str] | None,
    current_only: bool,
    bail_non_exist: bool,
) -> None:
    if not os.path.exists(entry_path):
        if bail_non_exist:
            raise FileNotFoundError(f"Not found '{entry_path}'")
        return
    if not os.path.isdir(entry_path):
        _add_file(files, suffixes, entry_path)
        return
    with os.scandir(entry_path) as entries:
        children = [os.path.join(entry_path, entry.name) for entry in entries]
    for child in children:
        if os.path.isdir(child):
            if not current_only:
                _list_files(files, child, suffixes, current_only, bail_non_exist)
        else:
            _add_file(files, suffixes, child)


def expand_glob_paths(paths: Iterable[str], bail_non_exist: bool) -> list[str]:
    """Expand simple ``*.ext`` / ``**/*.ext`` globs into unique file paths, in order."""
    files: dict[str, None] = {}
    for path in paths:
        base, suffixes, current_only = parse_glob(path)
        _list_files(files, base, suffixes, current_only, bail_non_exist)
    return list(files)


def list_file_names(directory: str | os.PathLike, ext: str) -> list[str]:
    """Sorted names of files in ``directory`` ending with ``ext``, without it."""
    try:
        names = os.listdir(directory)
    except OSError:
        return []
    stripped = [name[: len(name) - len(ext)] for name in names if name.endswith(ext)]
    return sorted(stripped)


def get_patch_extension(path: str) -> str | None:
    """Lowercased extension of ``path``, if it has one."""
    extension = _extension(path)
    return extension.lower() if extension is not None else None


def to_absolute_path(path: str) -> str:
    """Absolute, normalised form of ``path`` without resolving symlinks."""
    return os.path.abspath(path)


def resolve_home_dir(path: str) -> str:
    """Expand a leading ``~/`` (or ``~\\``) to the home directory."""
    if path.startswith(("~/", "~\\")):
        try:
            home = str(Path.home())
        except (RuntimeError, KeyError):
            return path
        return home + path[1:]
    return path