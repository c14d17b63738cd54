# chatkit

Small, dependency-free building blocks for command-line LLM chat tools and
OpenAI-compatible servers.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## What is inside

- `chatkit.crypto` offers `sha256` (a hex digest), `hmac_sha256` (raw bytes),
  `hex_encode` and `encode_uri`, which percent-encodes each path segment and
  keeps the slashes. It also has `base64_encode` and `base64_decode`, which
  raises `ValueError` on bad input.
- `chatkit.text` holds small text and environment helpers:
  - `now`, `now_timestamp`, `get_env_name`, `normalize_env_name` and
    `parse_bool`;
  - `estimate_token_length`, `light_theme_from_colorfgbg`, `strip_think_tag`,
    `extract_code_block` and `convert_option_string`;
  - `pretty_error`, which formats an exception with its chain of causes,
    together with `indent_text` and `multiline_text`;
  - `color_text` with the `Color` enum, plus `error_text`, `warning_text` and
    `dimmed_text`. These leave the text plain when `NO_COLOR` is set or when
    standard output is not a terminal;
  - `temp_file` and `is_url`.
- `chatkit.render_prompt` provides `render_prompt(template, variables)`, which
  renders prompt templates written with `{var}`, `{?var ...}` and
  `{!var ...}`.
- `chatkit.paths` offers these path helpers:
  - `safe_join_path` returns `None` for absolute paths and for paths that use
    `..`;
  - `parse_glob` and `expand_glob_paths` handle patterns such as
    `dir/**/*.{md,txt}` and `dir/*.md`. `expand_glob_paths` returns a list of
    unique file paths in the order they were found;
  - `list_file_names`, `get_patch_extension`, `to_absolute_path` and
    `resolve_home_dir`.
- `chatkit.abort` provides `AbortSignal`, a thread-safe pair of Ctrl-C and
  Ctrl-D flags, along with `create_abort_signal` and the coroutine
  `wait_abort_signal`.
- `chatkit.command` covers running other programs:
  - shell detection with `detect_shell` and `Shell`;
  - running external commands with `run_command`, `run_command_with_output`
    and `run_loader_command`. In the command line given to
    `run_loader_command`, `$1` stands for the input path and `$2` for an
    output file. Failures raise `CommandError`;
  - `edit_file` opens a file in an editor;
  - `append_to_shell_history` and `get_history_file` work with shell history
    files.
- `chatkit.variables` provides `interpolate_variables`. It replaces
  `{{__os__}}`, `{{__os_distro__}}`, `{{__os_family__}}`, `{{__arch__}}`,
  `{{__shell__}}`, `{{__locale__}}`, `{{__now__}}` and `{{__cwd__}}`, and
  leaves unknown placeholders untouched.
- `chatkit.loader` provides `LoadedDocument`, `load_file`,
  `is_loader_protocol` and `load_protocol_path`. A document is read directly
  from a file, or through a loader command configured for its extension or for
  a `protocol:` prefix.
- `chatkit.spinner` is a terminal spinner that runs in a background thread.
  Start it with `spawn_spinner`, then call `Spinner.set_message` and
  `Spinner.stop`. `SpinnerState` holds the drawing state. Nothing is drawn
  unless the output stream is a terminal.
- `chatkit.completions` builds OpenAI-style chat completion payloads. The
  types are `ToolCall` and `ChatCompletionsOutput`, and the builders are:
  - streaming SSE frames from `create_text_frame`, `create_tool_calls_frame`
    and `create_done_frame`;
  - non-streaming bodies from `ret_non_stream` and `ret_err`;
  - the helpers `build_chat_completion_chunk_json`, `generate_completion_id`
    and `cors_headers`.

  All the frames and bodies are returned as `bytes`.
- `chatkit.requests_parsing` reads OpenAI-style requests:
  - `parse_messages` turns request messages into `Message` objects, folding
    tool calls and their `tool` replies into `ToolCallsContent` /
    `ToolResult`;
  - `parse_tools` extracts function declarations;
  - `normalize_address` completes a listen address given as a bare port or a
    bare IP.

## Examples

```python
from chatkit.render_prompt import render_prompt

template = "{?session {session}{?role /}}{role}{?session )}{!session >}"
render_prompt(template, {"session": "temp", "role": "coder"})  # 'temp/coder)'
render_prompt(template, {})                                    # '>'
```

```python
from chatkit.paths import parse_glob

parse_glob("dir/**/*.{md,txt}")  # ('dir', ['md', 'txt'], False)
parse_glob("*.md")               # ('.', ['md'], True)
```

```python
from chatkit.completions import create_done_frame

create_done_frame("chatcmpl-1", "default", 0, False)
# b'data: {...,"finish_reason":"stop"}]}\n\ndata: [DONE]\n\n'
```

```python
from chatkit.requests_parsing import normalize_address

normalize_address("8080")      # '127.0.0.1:8080'
normalize_address("0.0.0.0")   # '0.0.0.0:8000'
```

## What it does not do

chatkit builds and parses the payloads of an OpenAI-compatible API, but it
does not contain an HTTP server. It also does not contain clients for any
model provider, model or role configuration, or retrieval-augmented search.

Beyond that:

- it does not fetch or crawl URLs;
- it does not convert HTML to Markdown;
- it does not copy to the clipboard;
- it does not read keypresses from the terminal. An `AbortSignal` is set only
  by calling `set_ctrlc` or `set_ctrld`.