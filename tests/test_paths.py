import os
from pathlib import Path

import pytest

from chatkit.paths import (
    expand_glob_paths,
    get_patch_extension,
    list_file_names,
    parse_glob,
    resolve_home_dir,
    safe_join_path,
    to_absolute_path,
)


def test_safe_join_path():
    assert safe_join_path("/home/user/dir1", "files/file1") == Path("/home/user/dir1/files/file1")
    assert safe_join_path("/home/user/dir1", "/files/file1") is None
    assert safe_join_path("/home/user/dir1", "../file1") is None


@pytest.mark.parametrize(
    "path, expected",
    [
        ("dir", ("dir", None, False)),
        ("dir/**", ("dir", None, False)),
        ("dir/file.md", ("dir/file.md", None, False)),
        ("**/*.md", (".", ["md"], False)),
        ("/**/*.md", ("/", ["md"], False)),
        ("dir/**/*.md", ("dir", ["md"], False)),
        ("dir/**/*.{md,txt}", ("dir", ["md", "txt"], False)),
        ("C:\\dir\\**\\*.{md,txt}", ("C:\\dir", ["md", "txt"], False)),
        ("*.md", (".", ["md"], True)),
        ("/*.md", ("/", ["md"], True)),
        ("dir/*.md", ("dir", ["md"], True)),
        ("dir/*.{md,txt}", ("dir", ["md", "txt"], True)),
        ("C:\\dir\\*.{md,txt}", ("C:\\dir", ["md", "txt"], True)),
    ],
)
def test_parse_glob(path, expected):
    assert parse_glob(path) == expected


def test_parse_glob_invalid_braces():
    with pytest.raises(ValueError, match="Invalid path"):
        parse_glob("dir/*.md}")


@pytest.fixture
def tree(tmp_path):
    (tmp_path / "a.md").write_text("a")
    (tmp_path / "b.txt").write_text("b")
    (tmp_path / "c.rs").write_text("c")
    (tmp_path / "sub" / "deep").mkdir(parents=True)
    (tmp_path / "sub" / "c.md").write_text("c")
    (tmp_path / "sub" / "deep" / "d.md").write_text("d")
    return tmp_path


def test_expand_recursive_glob(tree):
    result = expand_glob_paths([f"{tree}/**/*.md"], True)
    assert sorted(result) == sorted(
        [
            os.path.join(str(tree), "a.md"),
            os.path.join(str(tree), "sub", "c.md"),
            os.path.join(str(tree), "sub", "deep", "d.md"),
        ]
    )


def test_expand_current_only_with_braces(tree):
    result = expand_glob_paths([f"{tree}/*.{{md,txt}}"], True)
    assert sorted(result) == sorted(
        [os.path.join(str(tree), "a.md"), os.path.join(str(tree), "b.txt")]
    )


def test_expand_directory_lists_everything(tree):
    result = expand_glob_paths([str(tree)], True)
    assert len(result) == 5
    assert os.path.join(str(tree), "c.rs") in result


def test_expand_single_file_and_dedup(tree):
    file_path = str(tree / "a.md")
    assert expand_glob_paths([file_path, file_path], True) == [file_path]


def test_expand_missing(tree):
    missing = str(tree / "nope")
    with pytest.raises(FileNotFoundError, match="Not found"):
        expand_glob_paths([missing], True)
    assert expand_glob_paths([missing], False) == []


def test_list_file_names(tmp_path):
    for name in ("b.yaml", "a.yaml", "c.txt"):
        (tmp_path / name).write_text("")
    assert list_file_names(tmp_path, ".yaml") == ["a", "b"]
    assert list_file_names(tmp_path / "missing", ".yaml") == []


@pytest.mark.parametrize(
    "path, expected",
    [("Doc.MD", "md"), ("dir/archive.tar.gz", "gz"), ("noext", None), (".bashrc", None)],
)
def test_get_patch_extension(path, expected):
    assert get_patch_extension(path) == expected


def test_to_absolute_path(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = to_absolute_path("a/../b")
    assert os.path.isabs(result)
    assert result.endswith(os.sep + "b")
    assert ".." not in result


def test_resolve_home_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    home = str(Path.home())
    assert resolve_home_dir("~/notes.md") == home + "/notes.md"
    assert resolve_home_dir("~user/notes.md") == "~user/notes.md"
    assert resolve_home_dir("/abs/path") == "/abs/path"