"""Wire formats of the OpenAI-compatible chat completions API."""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from typing import Any

_SSE_PREFIX = "data: "
_SSE_SEPARATOR = "\n\n"
_SSE_DONE = "data: [DONE]\n\n"


def _dumps(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _sse(value: Any) -> str:
    return f"{_SSE_PREFIX}{_dumps(value)}{_SSE_SEPARATOR}"


@dataclass
class ToolCall:
    """A function call requested by the model."""

    name: str
    arguments: Any = field(default_factory=dict)
    id: str | None = None


@dataclass
class ChatCompletionsOutput:
    """The result of a non-streaming chat completion."""

    text: str = ""
    tool_calls: list[ToolCall] = field(default_factory=list)
    id: str | None = None
    input_tokens: int | None = None
    output_tokens: int | None = None


def generate_completion_id() -> str:
    """A completion id built from the current sub-second nanoseconds."""
    return f"chatcmpl-{time.time_ns() % 1_000_000_000}"


def cors_headers() -> dict[str, str]:
    """Headers that allow cross-origin requests from anywhere."""
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": "GET,POST,PUT,PATCH,DELETE",
        "Access-Control-Allow-Headers": "Content-Type,Authorization",
    }


def build_chat_completion_chunk_json(
    completion_id: str, model: str, created: int, choice: dict
) -> dict:
    """Wrap ``choice`` in a ``chat.completion.chunk`` object."""
    return {
        "id": completion_id,
        "object": "chat.completion.chunk",
        "created": created,
        "model": model,
        "choices": [choice],
    }


def create_text_frame(completion_id: str, model: str, created: int, content: str) -> bytes:
    """An SSE event carrying a piece of assistant text."""
    if content:
        delta: dict[str, Any] = {"content": content}
    else:
        delta = {"role": "assistant", "content": content}
    choice = {"index": 0, "delta": delta, "finish_reason": None}
    chunk = build_chat_completion_chunk_json(completion_id, model, created, choice)
    return _sse(chunk).encode("utf-8")


def _tool_call_chunks(
    completion_id: str, model: str, created: int, index: int, call: ToolCall
) -> tuple[dict, dict]:
    announce = {
        "index": 0,
        "delta": {
            "role": "assistant",
            "content": None,
            "tool_calls": [
                {
                    "index": index,
                    "id": call.id,
                    "type": "function",
                    "function": {"name": call.name, "arguments": ""},
                }
            ],
        },
        "finish_reason": None,
    }
    arguments = {
        "index": 0,
        "delta": {
            "tool_calls": [
                {"index": index, "function": {"arguments": _dumps(call.arguments)}}
            ]
        },
        "finish_reason": None,
    }
    return (
        build_chat_completion_chunk_json(completion_id, model, created, announce),
        build_chat_completion_chunk_json(completion_id, model, created, arguments),
    )


def create_tool_calls_frame(
    completion_id: str, model: str, created: int, tool_calls: list[ToolCall]
) -> bytes:
    """SSE events announcing each tool call, then its arguments."""
    events = (
        _sse(chunk)
        for index, call in enumerate(tool_calls)
        for chunk in _tool_call_chunks(completion_id, model, created, index, call)
    )
    return "".join(events).encode("utf-8")


def create_done_frame(
    completion_id: str, model: str, created: int, has_tool_calls: bool
) -> bytes:
    """The final SSE event with the finish reason, followed by ``[DONE]``."""
    choice = {
        "index": 0,
        "delta": {},
        "finish_reason": "tool_calls" if has_tool_calls else "stop",
    }
    chunk = build_chat_completion_chunk_json(completion_id, model, created, choice)
    return (_sse(chunk) + _SSE_DONE).encode("utf-8")


def ret_non_stream(
    completion_id: str, model: str, created: int, output: ChatCompletionsOutput
) -> bytes:
    """The JSON body of a non-streaming ``chat.completion`` response."""
    response_id = output.id if output.id is not None else completion_id
    input_tokens = output.input_tokens or 0
    output_tokens = output.output_tokens or 0
    if not output.tool_calls:
        choice = {
            "index": 0,
            "message": {"role": "assistant", "content": output.text},
            "logprobs": None,
            "finish_reason": "stop",
        }
    else:
        tool_calls = [
            {
                "id": call.id,
                "type": "function",
                "function": {"name": call.name, "arguments": _dumps(call.arguments)},
            }
            for call in output.tool_calls
        ]
        choice = {
            "index": 0,
            "message": {
                "role": "assistant",
                "content": output.text or None,
                "tool_calls": tool_calls,
            },
            "logprobs": None,
            "finish_reason": "tool_calls",
        }
    body = {
        "id": response_id,
        "object": "chat.completion",
        "created": created,
        "model": model,
        "choices": [choice],
        "usage": {
            "prompt_tokens": input_tokens,
            "completion_tokens": output_tokens,
            "total_tokens": input_tokens + output_tokens,
        },
    }
    return _dumps(body).encode("utf-8")


def ret_err(err: object) -> bytes:
    """The JSON body of an ``invalid_request_error`` response."""
    body = {"error": {"message": str(err), "type": "invalid_request_error"}}
    return _dumps(body).encode("utf-8")