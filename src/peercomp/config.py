"""Where peercomp keeps its files, and how the effective settings are decided.

Layout (Linux/BSD follow XDG, other platforms use ``~/.peercomp``)::

    $XDG_CONFIG_HOME/peercomp/config.json     GlobalConfig
    $XDG_CONFIG_HOME/peercomp/grammars/*.json user grammars (``grammar add``)
    $XDG_DATA_HOME/peercomp/logs/             crash logs

Nothing here creates a directory on a read path: ``peercomp complete`` runs
on every Tab press and only reads. Writes go through :func:`_atomic_write`.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from peercomp.exceptions import ConfigError
from peercomp.models import CommandGrammar, GlobalConfig

_APP_NAME = "peercomp"
_GRAMMAR_SUFFIXES = (".json", ".yaml", ".yml")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


# --- Directories ---


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _xdg_base(env_var: str, *default_segments: str) -> Path:
    return Path(os.environ.get(env_var) or Path.home().joinpath(*default_segments))


def get_config_dir() -> Path:
    """``$XDG_CONFIG_HOME/peercomp`` on Linux/BSD, ``~/.peercomp`` elsewhere. Not created."""
    if _is_xdg_platform():
        return _xdg_base("XDG_CONFIG_HOME", ".config") / _APP_NAME
    return Path.home() / f".{_APP_NAME}"


def get_data_dir() -> Path:
    """``$XDG_DATA_HOME/peercomp`` on Linux/BSD, ``~/.peercomp`` elsewhere. Created on demand."""
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", ".local", "share") / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_grammars_dir() -> Path:
    return get_config_dir() / "grammars"


# --- Writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* via a sibling temp file, so readers never see half a file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as tmp:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise


def write_script(path: Path, script: str) -> None:
    """Write a generated shell glue script to *path*."""
    _atomic_write(path, script)


def save_grammar(grammar: CommandGrammar) -> Path:
    """Store *grammar* as ``<grammars_dir>/<command>.json``, replacing any previous one."""
    path = get_grammars_dir() / f"{grammar.command}.json"
    data = grammar.model_dump(mode="json", exclude_defaults=True)
    _atomic_write(path, json.dumps(data, indent=2) + "\n")
    return path


# --- Reads ---


def list_grammar_files() -> list[Path]:
    """Grammar documents in the user grammars directory, sorted by name."""
    grammars_dir = get_grammars_dir()
    if not grammars_dir.is_dir():
        return []
    return sorted(
        p for p in grammars_dir.iterdir()
        if p.is_file() and p.suffix.lower() in _GRAMMAR_SUFFIXES
    )


def load_global_config() -> GlobalConfig:
    """Read ``config.json``; defaults when it does not exist.

    Raises:
        ConfigError: If the file cannot be decoded or does not validate.
    """
    path = get_config_dir() / "config.json"
    if not path.is_file():
        return GlobalConfig()
    try:
        return GlobalConfig.model_validate(json.loads(path.read_text(encoding="utf-8")))
    except (OSError, ValueError) as exc:
        # ValueError covers JSONDecodeError, UnicodeDecodeError and ValidationError.
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def _env_flag(name: str) -> Optional[bool]:
    """Boolean environment variable; ``None`` when unset or not a recognised word."""
    value = os.environ.get(name, "").strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    return None


def resolve_config(
    cli_format: Optional[str] = None,
    cli_log_file: Optional[str] = None,
) -> GlobalConfig:
    """Merge defaults, ``config.json``, environment and CLI flags, later ones winning.

    Environment variables: ``PEERCOMP_LOG_FILE``, ``PEERCOMP_MARK_DIRECTORIES``,
    ``PEERCOMP_SHOW_HIDDEN``.

    Raises:
        ConfigError: If ``config.json`` is invalid.
    """
    config = load_global_config()

    env_log_file = os.environ.get("PEERCOMP_LOG_FILE")
    if env_log_file:
        config.log_file = env_log_file
    mark_dirs = _env_flag("PEERCOMP_MARK_DIRECTORIES")
    if mark_dirs is not None:
        config.path.mark_directories = mark_dirs
    show_hidden = _env_flag("PEERCOMP_SHOW_HIDDEN")
    if show_hidden is not None:
        config.path.show_hidden = show_hidden

    if cli_log_file is not None:
        config.log_file = cli_log_file
    if cli_format is not None:
        config.output.format = cli_format
    return config
