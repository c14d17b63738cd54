"""Loading documents from files or through external loader commands."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field

from chatkit.command import run_loader_command
from chatkit.paths import get_patch_extension

EXTENSION_METADATA = "__extension__"
DEFAULT_EXTENSION = "txt"


@dataclass
class LoadedDocument:
    """A document's path, text contents and string metadata."""

    path: str
    contents: str
    metadata: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: object) -> LoadedDocument:
        """Build a document from decoded JSON; raises ``ValueError`` if malformed."""
        if not isinstance(data, dict):
            raise ValueError("document must be an object")
        path = data.get("path")
        contents = data.get("contents")
        metadata = data.get("metadata", {})
        if not isinstance(path, str) or not isinstance(contents, str):
            raise ValueError("document needs string 'path' and 'contents'")
        if not isinstance(metadata, dict) or not all(
            isinstance(value, str) for value in metadata.values()
        ):
            raise ValueError("document metadata must map strings to strings")
        return cls(path, contents, dict(metadata))


def load_file(loaders: Mapping[str, str], path: str) -> LoadedDocument:
    """Load a file, through the loader registered for its extension if any."""
    extension = get_patch_extension(path) or DEFAULT_EXTENSION
    loader_command = loaders.get(extension)
    if loader_command is not None:
        contents = run_loader_command(path, extension, loader_command)
        return LoadedDocument(path, contents, {EXTENSION_METADATA: DEFAULT_EXTENSION})
    with open(path, encoding="utf-8") as file:
        contents = file.read()
    return LoadedDocument(path, contents, {EXTENSION_METADATA: extension})


def is_loader_protocol(loaders: Mapping[str, str], path: str) -> bool:
    """Whether ``path`` starts with ``<protocol>:`` for a registered loader."""
    protocol, sep, _ = path.partition(":")
    return bool(sep) and protocol in loaders


def _parse_documents(contents: str) -> list[LoadedDocument] | None:
    try:
        data = json.loads(contents)
    except ValueError:
        return None
    if not isinstance(data, list):
        return None
    try:
        return [LoadedDocument.from_dict(item) for item in data]
    except ValueError:
        return None


def load_protocol_path(loaders: Mapping[str, str], path: str) -> list[LoadedDocument]:
    """Load ``<protocol>:<path>`` with the protocol's loader command.

    A loader may print a JSON list of documents; anything else is taken as the
    contents of a single document.
    """
    protocol, sep, new_path = path.partition(":")
    loader_command = loaders.get(protocol) if sep else None
    if loader_command is None:
        raise ValueError(f"No document loader for '{path}'")
    contents = run_loader_command(new_path, protocol, loader_command)
    documents = _parse_documents(contents)
    if documents is None:
        return [LoadedDocument(path, contents)]
    for document in documents:
        if document.path.startswith(path):
            continue
        if document.path.startswith(new_path):
            document.path = f"{protocol}:{document.path}"
        else:
            document.path = f"{path}/{document.path}"
    return documents