"""Parsing of chat completion request bodies and server addresses."""

from __future__ import annotations

import enum
import ipaddress
import json
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Union

from chatkit.completions import ToolCall

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000

_PORT_RE = re.compile(r"\+?[0-9]+")


class MessageRole(str, enum.Enum):
    """Who a chat message comes from."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass
class ToolResult:
    """A tool call together with the value the tool returned."""

    call: ToolCall
    output: Any


@dataclass
class ToolCallsContent:
    """Assistant content made of tool calls, their results and optional text."""

    tool_results: list[ToolResult] = field(default_factory=list)
    text: str = ""


Content = Union[str, list, ToolCallsContent]


@dataclass
class Message:
    """A chat message: a role and its content."""

    role: MessageRole
    content: Content


def _valid_part(part: object) -> bool:
    if not isinstance(part, dict):
        return False
    kind = part.get("type")
    if kind == "text":
        return isinstance(part.get("text"), str)
    if kind == "image_url":
        image = part.get("image_url")
        return isinstance(image, dict) and isinstance(image.get("url"), str)
    return False


def _content_text(content: Content) -> str:
    if isinstance(content, str):
        return content
    if isinstance(content, ToolCallsContent):
        return content.text
    return "\n\n".join(part["text"] for part in content if part.get("type") == "text")


@dataclass
class _PendingToolCalls:
    text: str
    calls: list[tuple[str | None, str, Any]]
    values: list[tuple[Any, str | None]] = field(default_factory=list)


def _parse_content(message: dict, fail: ValueError) -> Content:
    if "content" not in message:
        return ""
    value = message["content"]
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        if not all(_valid_part(part) for part in value):
            raise fail
        return [dict(part) for part in value]
    raise fail


def _parse_tool_calls(tool_calls: list, fail: ValueError) -> list[tuple[str | None, str, Any]]:
    calls = []
    for tool_call in tool_calls:
        if not isinstance(tool_call, dict):
            raise fail
        call_id = tool_call.get("id")
        call_id = call_id if isinstance(call_id, str) else None
        function = tool_call.get("function")
        if not isinstance(function, dict):
            raise fail
        name = function.get("name")
        arguments = function.get("arguments")
        if not isinstance(name, str) or not isinstance(arguments, str):
            raise fail
        try:
            parsed = json.loads(arguments)
        except ValueError as err:
            raise fail from err
        calls.append((call_id, name, parsed))
    return calls


def _tool_value(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError:
        return text


def parse_messages(messages: Iterable[Any]) -> list[Message]:
    """Turn OpenAI-style request messages into :class:`Message` objects.

    Assistant tool calls and the ``tool`` messages that answer them are folded
    into a single assistant message carrying :class:`ToolCallsContent`.
    Raises ``ValueError`` on any malformed message.
    """
    output: list[Message] = []
    pending: _PendingToolCalls | None = None
    for i, message in enumerate(messages):
        fail = ValueError(f"Failed to parse '.messages[{i}]'")
        if not isinstance(message, dict):
            raise fail
        role = message.get("role")
        if not isinstance(role, str):
            raise fail
        content = _parse_content(message, fail)

        if role in ("system", "user"):
            output.append(Message(MessageRole(role), content))
        elif role == "assistant":
            tool_calls = message.get("tool_calls")
            if isinstance(tool_calls, list):
                if pending is not None:
                    raise fail
                pending = _PendingToolCalls(
                    _content_text(content), _parse_tool_calls(tool_calls, fail)
                )
            else:
                output.append(Message(MessageRole.ASSISTANT, content))
        elif role == "tool":
            if pending is None:
                raise fail
            current, pending = pending, None
            tool_call_id = message.get("tool_call_id")
            tool_call_id = tool_call_id if isinstance(tool_call_id, str) else None
            current.values.append((_tool_value(_content_text(content)), tool_call_id))
            if len(current.calls) == len(current.values):
                results = []
                for (call_id, name, arguments), (value, answered_id) in zip(
                    current.calls, current.values
                ):
                    if call_id != answered_id:
                        raise fail
                    results.append(ToolResult(ToolCall(name, arguments, call_id), value))
                output.append(
                    Message(MessageRole.ASSISTANT, ToolCallsContent(results, current.text))
                )
            else:
                pending = current
        else:
            raise fail

    if pending is not None:
        raise ValueError("Invalid messages")
    return output


def parse_tools(tools: Iterable[Any] | None) -> list[dict] | None:
    """Extract the function declarations from a request's ``tools`` list.

    Returns ``None`` when no tools were given; raises ``ValueError`` when a tool
    is not a well-formed function tool.
    """
    if tools is None:
        return None
    functions = []
    for i, tool in enumerate(tools):
        function = tool.get("function") if isinstance(tool, dict) else None
        if (
            not isinstance(tool, dict)
            or tool.get("type") != "function"
            or not isinstance(function, dict)
            or not isinstance(function.get("name"), str)
        ):
            raise ValueError(f"Failed to parse '.tools[{i}]'")
        functions.append(dict(function))
    return functions


def _parse_port(value: str) -> int | None:
    if not _PORT_RE.fullmatch(value):
        return None
    port = int(value)
    return port if port <= 0xFFFF else None


def normalize_address(addr: str) -> str:
    """Complete a listen address given as a bare port, a bare IP, or ``host:port``."""
    port = _parse_port(addr)
    if port is not None:
        return f"{DEFAULT_HOST}:{port}"
    if "%" not in addr:
        try:
            ip = ipaddress.ip_address(addr)
        except ValueError:
            pass
        else:
            return f"{ip}:{DEFAULT_PORT}"
    return addr