"""Shell detection, running external commands and shell history."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path, PurePath

from chatkit.text import get_env_name, now_timestamp, temp_file

logger = logging.getLogger(__name__)


class CommandError(RuntimeError):
    """An external command could not be run or failed."""


@dataclass(frozen=True)
class Shell:
    """The user's shell: its name, executable and the flag that runs a command."""

    name: str
    cmd: str
    arg: str


def _is_windows() -> bool:
    return sys.platform == "win32"


def _windows_powershell() -> str | None:
    module_path = os.environ.get("PSModulePath")
    if module_path is None:
        return None
    module_path = module_path.lower()
    if not module_path.startswith("c:\\users"):
        return None
    if "\\powershell\\7\\" in module_path:
        return "pwsh.exe"
    return "powershell.exe"


def detect_shell() -> Shell:
    """Work out which shell the user runs."""
    cmd = os.environ.get(get_env_name("shell"))
    if cmd is None:
        cmd = _windows_powershell() if _is_windows() else os.environ.get("SHELL")
    stem = PurePath(cmd).stem if cmd else ""
    if not cmd or not stem:
        if _is_windows():
            cmd, name = "cmd.exe", "cmd"
        else:
            cmd, name = "/bin/sh", "sh"
    else:
        name = "nushell" if stem == "nu" else stem.lower()
    arg = "/C" if name == "cmd" else "-c"
    return Shell(name, cmd, arg)


def _merged_env(envs: Mapping[str, str] | None) -> dict[str, str] | None:
    if not envs:
        return None
    return {**os.environ, **envs}


def _argv(cmd: str, args: Sequence[str | os.PathLike]) -> list[str]:
    return [cmd, *(os.fspath(arg) for arg in args)]


def run_command(
    cmd: str,
    args: Sequence[str | os.PathLike],
    envs: Mapping[str, str] | None = None,
) -> int:
    """Run a command with inherited stdio and return its exit code."""
    completed = subprocess.run(_argv(cmd, args), env=_merged_env(envs), check=False)
    return completed.returncode if completed.returncode >= 0 else 0


def run_command_with_output(
    cmd: str,
    args: Sequence[str | os.PathLike],
    envs: Mapping[str, str] | None = None,
) -> tuple[bool, str, str]:
    """Run a command and return ``(success, stdout, stderr)``."""
    completed = subprocess.run(
        _argv(cmd, args), env=_merged_env(envs), capture_output=True, check=False
    )
    try:
        stdout = completed.stdout.decode("utf-8")
    except UnicodeDecodeError as err:
        raise ValueError("Invalid UTF-8 in stdout") from err
    try:
        stderr = completed.stderr.decode("utf-8")
    except UnicodeDecodeError as err:
        raise ValueError("Invalid UTF-8 in stderr") from err
    return completed.returncode == 0, stdout, stderr


def run_loader_command(path: str, extension: str, loader_command: str) -> str:
    """Run a document loader command and return what it produced.

    ``$1`` in the command stands for the input path; ``$2``, if present, for a
    temporary output file that is read back instead of standard output.
    """
    invalid = f"Invalid document loader '{extension}': `{loader_command}`"
    try:
        parts = shlex.split(loader_command)
    except ValueError as err:
        raise ValueError(invalid) from err
    if not parts:
        raise ValueError(invalid)

    outpath = str(temp_file("-output-", ""))
    use_stdout = True
    cmd_args = []
    for part in parts:
        part = part.replace("$1", path)
        if "$2" in part:
            use_stdout = False
            part = part.replace("$2", outpath)
        cmd_args.append(part)

    cmd_eval = shlex.join(cmd_args)
    logger.debug("run `%s`", cmd_eval)
    cmd, *args = cmd_args
    not_installed = f"Unable to run `{cmd_eval}`, Perhaps '{cmd}' is not installed?"
    exited = f"The command `{cmd_eval}` exited with non-zero."

    if use_stdout:
        try:
            success, stdout, stderr = run_command_with_output(cmd, args)
        except OSError as err:
            raise CommandError(not_installed) from err
        if not success:
            raise CommandError(stderr or exited)
        return stdout

    try:
        status = run_command(cmd, args)
    except OSError as err:
        raise CommandError(not_installed) from err
    if status != 0:
        raise CommandError(exited)
    output = Path(outpath)
    try:
        contents = output.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as err:
        raise CommandError("Failed to read file generated by the loader") from err
    output.unlink(missing_ok=True)
    return contents


def edit_file(editor: str, path: str | os.PathLike) -> None:
    """Open ``path`` in ``editor`` and wait for it to exit."""
    subprocess.run([editor, os.fspath(path)], check=False)


def append_to_shell_history(shell: str, command: str, exit_code: int) -> None:
    """Append ``command`` to the history file of ``shell``, if it has one."""
    history_file = get_history_file(shell)
    if history_file is None:
        return
    command = command.replace("\n", " ")
    now = now_timestamp()
    if shell == "fish":
        entry = f"- cmd: {command}\n  when: {now}"
    elif shell == "zsh":
        entry = f": {now}:{exit_code};{command}"
    else:
        entry = command
    with open(history_file, "a", encoding="utf-8") as file:
        file.write(entry + "\n")


def _home() -> Path | None:
    try:
        return Path.home()
    except (RuntimeError, KeyError):
        return None


def _config_dir() -> Path | None:
    if _is_windows():
        appdata = os.environ.get("APPDATA")
        return Path(appdata) if appdata else None
    home = _home()
    if sys.platform == "darwin":
        return home / "Library" / "Application Support" if home else None
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg and os.path.isabs(xdg):
        return Path(xdg)
    return home / ".config" if home else None


def _data_dir() -> Path | None:
    appdata = os.environ.get("APPDATA")
    return Path(appdata) if appdata else None


def get_history_file(shell: str) -> Path | None:
    """Path of the history file that ``shell`` uses, or ``None`` if unknown."""
    if shell in ("bash", "sh", "zsh"):
        histfile = os.environ.get("HISTFILE")
        if histfile is not None:
            return Path(histfile)
        home = _home()
        if home is None:
            return None
        return home / (".zsh_history" if shell == "zsh" else ".bash_history")
    if shell == "nushell":
        config = _config_dir()
        return config / "nushell" / "history.txt" if config else None
    if shell in ("powershell", "pwsh"):
        tail = Path("PSReadLine") / "ConsoleHost_history.txt"
        if _is_windows():
            data = _data_dir()
            if data is None:
                return None
            return data / "Microsoft" / "Windows" / "PowerShell" / tail
        home = _home()
        return home / ".local" / "share" / "powershell" / tail if home else None
    home = _home()
    if home is None:
        return None
    if shell == "fish":
        return home / ".local" / "share" / "fish" / "fish_history"
    if shell == "ksh":
        return home / ".ksh_history"
    if shell == "tcsh":
        return home / ".history"
    return None