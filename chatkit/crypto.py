"""Hashing, HMAC and encoding helpers."""

from __future__ import annotations

import base64
import hashlib
import hmac
from urllib.parse import quote


def _as_bytes(data: bytes | bytearray | str) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def sha256(text: str | bytes) -> str:
    """Return the lowercase hex SHA-256 digest of ``text``."""
    return hashlib.sha256(_as_bytes(text)).hexdigest()


def hmac_sha256(key: bytes | str, msg: str | bytes) -> bytes:
    """Return the raw HMAC-SHA256 of ``msg`` under ``key``."""
    return hmac.new(_as_bytes(key), _as_bytes(msg), hashlib.sha256).digest()


def hex_encode(data: bytes | bytearray) -> str:
    """Encode bytes as lowercase hexadecimal."""
    return bytes(data).hex()


def encode_uri(uri: str) -> str:
    """Percent-encode every path segment of ``uri``, keeping the slashes."""
    return "/".join(quote(segment, safe="") for segment in uri.split("/"))


def base64_encode(data: bytes | bytearray | str) -> str:
    """Encode with the standard, padded base64 alphabet."""
    return base64.b64encode(_as_bytes(data)).decode("ascii")


def base64_decode(data: bytes | str) -> bytes:
    """Decode standard, padded base64; raises ``ValueError`` on bad input."""
    return base64.b64decode(_as_bytes(data), validate=True)