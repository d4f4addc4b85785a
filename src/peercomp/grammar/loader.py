"""Read grammar documents (JSON or YAML) from a file, an http(s) URL, or stdin.

:func:`load_grammar` is what ``peercomp grammar check|add`` call; it accepts
all three kinds of source. The registry built for a completion request only
reads local files (see :func:`is_local_source`): a Tab press must never wait
on the network or on the terminal.

Every failure, including undecodable bytes, surfaces as
:class:`~peercomp.exceptions.GrammarError`.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml
from pydantic import ValidationError

from peercomp.exceptions import GrammarError
from peercomp.models import CommandGrammar

_URL_PREFIXES = ("http://", "https://")


def is_local_source(source: str) -> bool:
    """True unless *source* is ``-`` (stdin) or an http(s) URL."""
    return source != "-" and not source.startswith(_URL_PREFIXES)


def load_grammar(source: str) -> CommandGrammar:
    """Load *source* and validate it as a :class:`~peercomp.models.CommandGrammar`.

    Raises:
        GrammarError: If the document cannot be read or parsed, or breaks a
            grammar rule (duplicate names, malformed flags, ...).
    """
    document = load_grammar_document(source)
    try:
        return CommandGrammar.model_validate(document)
    except ValidationError as exc:
        raise GrammarError(f"Invalid grammar in {source}: {exc}") from exc


def load_grammar_document(source: str) -> dict[str, Any]:
    """Load the raw mapping behind *source* (path, URL, or ``-``)."""
    if source == "-":
        content, hint = _read_stdin(), ""
    elif source.startswith(_URL_PREFIXES):
        content, hint = _fetch(source)
    else:
        content, hint = _read_file(source)
    return _parse_content(content, hint=hint)


def _read_stdin() -> str:
    try:
        content = sys.stdin.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise GrammarError(f"Failed to read from stdin: {exc}") from exc
    if not content.strip():
        raise GrammarError("No input received from stdin")
    return content


def _fetch(url: str) -> tuple[str, str]:
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise GrammarError(
            f"HTTP {exc.response.status_code} fetching grammar from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise GrammarError(f"Failed to fetch grammar from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        return response.text, "json"
    if "yaml" in content_type or "yml" in content_type:
        return response.text, "yaml"
    return response.text, ""


def _read_file(path: str) -> tuple[str, str]:
    file_path = Path(path).expanduser()
    if not file_path.is_file():
        raise GrammarError(f"Grammar file not found: {path}")
    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise GrammarError(f"Failed to read grammar file {path}: {exc}") from exc
    if not content.strip():
        raise GrammarError(f"Grammar file is empty: {path}")

    suffix = file_path.suffix.lower()
    if suffix == ".json":
        return content, "json"
    if suffix in (".yaml", ".yml"):
        return content, "yaml"
    return content, ""


def _as_mapping(document: Any) -> dict[str, Any]:
    if not isinstance(document, dict):
        kind = "empty document" if document is None else type(document).__name__
        raise GrammarError(f"Grammar must be a JSON/YAML object (got {kind})")
    return document


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse *content* as JSON, then YAML; a ``json`` hint disables the YAML retry."""
    json_error = None
    if hint != "yaml":
        try:
            return _as_mapping(json.loads(content))
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise GrammarError(f"Invalid JSON: {exc}") from exc
            json_error = exc

    try:
        return _as_mapping(yaml.safe_load(content))
    except yaml.YAMLError as exc:
        msg = "Failed to parse grammar as JSON or YAML"
        if json_error is not None:
            msg += f"\n  JSON error: {json_error}"
        raise GrammarError(f"{msg}\n  YAML error: {exc}") from exc
