"""Canonical Pydantic models shared across all peercomp modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into two groups:

**Grammar and request models** -- immutable (``frozen=True``) values that
describe a target program's flags and a single completion request:
    :class:`DomainKind`, :class:`ValueDomain`, :class:`OptionSpec`,
    :class:`CommandGrammar`, :class:`Token`, :class:`CompletionRequest`,
    :class:`ResolverState`, and :class:`CompletionResult`.

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`PathConfig`, :class:`OutputConfig`, and :class:`GlobalConfig`.

Grammar invariants (unique long names, unique short names, well-formed flag
spellings) are enforced by validators, so a malformed grammar document fails
at load time rather than during a completion request.
"""

from __future__ import annotations

import enum
from typing import Any, Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator, model_validator

from peercomp.exceptions import UnmatchedPreviousTokenError


# --- Grammar Models ---


class DomainKind(str, enum.Enum):
    """The kind of completion a flag's argument expects."""

    NONE = "none"
    ENUM = "enum"
    PATH = "path"


class ValueDomain(BaseModel):
    """Value domain of one option: none, a fixed enumeration, or a filesystem path.

    Only ``ENUM`` domains carry ``values``; they are kept in declared order,
    which is also the order candidates are offered in. An empty enumeration is
    accepted here and reported as unavailable by the enum provider.

    Example::

        ValueDomain.enum("tcp", "zmq")
        ValueDomain.path()
    """

    model_config = ConfigDict(frozen=True)

    kind: DomainKind = DomainKind.NONE
    values: tuple[str, ...] = ()

    @model_validator(mode="after")
    def _values_only_for_enum(self) -> ValueDomain:
        if self.kind != DomainKind.ENUM and self.values:
            raise ValueError(f"'{self.kind.value}' domain cannot declare values")
        return self

    @classmethod
    def none(cls) -> ValueDomain:
        return cls(kind=DomainKind.NONE)

    @classmethod
    def path(cls) -> ValueDomain:
        return cls(kind=DomainKind.PATH)

    @classmethod
    def enum(cls, *values: str) -> ValueDomain:
        return cls(kind=DomainKind.ENUM, values=values)

    @property
    def takes_value(self) -> bool:
        """Whether an option with this domain consumes the following token."""
        return self.kind != DomainKind.NONE


class OptionSpec(BaseModel):
    """One recognised flag of the target program.

    ``domain`` accepts the full mapping form (``{"kind": "enum", "values":
    [...]}``) as well as two shorthands used in hand-written grammar files: a
    bare kind string (``"path"``) and a bare list, which means an enumeration.
    """

    model_config = ConfigDict(frozen=True)

    long: str = Field(description="Canonical long form, e.g. --overlay")
    short: Optional[str] = Field(default=None, description="Short form, e.g. -o")
    domain: ValueDomain = Field(default_factory=ValueDomain)

    @field_validator("long")
    @classmethod
    def _check_long(cls, value: str) -> str:
        if not value.startswith("--") or len(value) < 3 or any(c.isspace() for c in value):
            raise ValueError(f"long option must look like '--name', got {value!r}")
        return value

    @field_validator("short")
    @classmethod
    def _check_short(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        if len(value) != 2 or value[0] != "-" or value[1] in "- \t":
            raise ValueError(f"short option must look like '-x', got {value!r}")
        return value

    @field_validator("domain", mode="before")
    @classmethod
    def _expand_domain_shorthand(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, str):
            return {"kind": value}
        if isinstance(value, (list, tuple)):
            return {"kind": DomainKind.ENUM, "values": value}
        return value

    @property
    def names(self) -> tuple[str, ...]:
        """All spellings of this option, long form first."""
        if self.short is None:
            return (self.long,)
        return (self.long, self.short)


class CommandGrammar(BaseModel):
    """A command name plus its ordered option specifications.

    Option order is significant: it defines the order in which option names
    are offered when no prefix narrows the candidate set.

    The model doubles as the grammar document schema read by
    :mod:`peercomp.grammar.loader`::

        command: peerd
        options:
          - long: --overlay
            short: -o
            domain: [tcp, zmq]
    """

    model_config = ConfigDict(frozen=True)

    command: str
    options: tuple[OptionSpec, ...] = ()

    _index: dict[str, OptionSpec] = PrivateAttr(default_factory=dict)

    @field_validator("command")
    @classmethod
    def _check_command(cls, value: str) -> str:
        if not value or any(c.isspace() for c in value):
            raise ValueError(f"command name must be a single non-empty word, got {value!r}")
        return value

    @model_validator(mode="after")
    def _check_unique_names(self) -> CommandGrammar:
        seen_long: set[str] = set()
        seen_short: set[str] = set()
        for opt in self.options:
            if opt.long in seen_long:
                raise ValueError(f"duplicate long option {opt.long} in '{self.command}'")
            seen_long.add(opt.long)
            if opt.short is not None:
                if opt.short in seen_short:
                    raise ValueError(f"duplicate short option {opt.short} in '{self.command}'")
                seen_short.add(opt.short)
        return self

    def model_post_init(self, __context: Any) -> None:
        self._index = {name: opt for opt in self.options for name in opt.names}

    def find_option(self, token: str) -> Optional[OptionSpec]:
        """Return the option spelled *token* (long or short form), or ``None``."""
        return self._index.get(token)

    def get_option(self, token: str) -> OptionSpec:
        """Return the option spelled *token*.

        Raises:
            UnmatchedPreviousTokenError: If no option of this grammar is
                spelled *token*.
        """
        try:
            return self._index[token]
        except KeyError:
            raise UnmatchedPreviousTokenError(token) from None

    def option_names(self) -> list[str]:
        """All option spellings: short forms in declared order, then long forms."""
        shorts = [opt.short for opt in self.options if opt.short is not None]
        longs = [opt.long for opt in self.options]
        return shorts + longs


# --- Request Models ---


class Token(BaseModel):
    """One word of the command line as split by the host shell."""

    model_config = ConfigDict(frozen=True)

    text: str
    is_current: bool = False


class CompletionRequest(BaseModel):
    """The full token sequence of one completion request plus the cursor index.

    The tokenizer guarantees that ``tokens[cursor_index]`` exists and is the
    only token flagged ``is_current``.
    """

    model_config = ConfigDict(frozen=True)

    tokens: tuple[Token, ...]
    cursor_index: int = 0

    @model_validator(mode="after")
    def _check_cursor(self) -> CompletionRequest:
        if not 0 <= self.cursor_index < len(self.tokens):
            raise ValueError(
                f"cursor index {self.cursor_index} outside {len(self.tokens)} tokens"
            )
        if not self.tokens[self.cursor_index].is_current:
            raise ValueError("token under the cursor must be flagged is_current")
        return self

    @property
    def command_name(self) -> str:
        return self.tokens[0].text

    @property
    def current(self) -> str:
        return self.tokens[self.cursor_index].text

    @property
    def previous(self) -> str:
        if self.cursor_index == 0:
            return ""
        return self.tokens[self.cursor_index - 1].text


class ResolverState(str, enum.Enum):
    """States of the completion resolver."""

    EXPECT_COMMAND_NAME = "expect_command_name"
    EXPECT_OPTION_OR_POSITIONAL = "expect_option_or_positional"
    EXPECT_OPTION_VALUE = "expect_option_value"


class CompletionResult(BaseModel):
    """Ordered, de-duplicated candidate strings for one request (may be empty)."""

    model_config = ConfigDict(frozen=True)

    candidates: tuple[str, ...] = ()

    def __iter__(self) -> Iterator[str]:  # type: ignore[override]
        return iter(self.candidates)

    def __len__(self) -> int:
        return len(self.candidates)

    def __bool__(self) -> bool:
        return bool(self.candidates)


# --- Config Models ---


class PathConfig(BaseModel):
    """Filesystem path completion settings stored in :class:`GlobalConfig`."""

    mark_directories: bool = Field(
        default=False, description="Append '/' to directory candidates"
    )
    show_hidden: bool = Field(
        default=True,
        description="Offer dot-entries even when the typed name does not start with '.'",
    )


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/peercomp/config.json``.

    Read by :func:`~peercomp.config.load_global_config` and edited by hand.
    Environment variables and CLI flags override these values; see
    :func:`~peercomp.config.resolve_config`.
    """

    path: PathConfig = Field(default_factory=PathConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    grammar_files: list[str] = Field(
        default_factory=list,
        description="Extra grammar documents (JSON/YAML) loaded at startup",
    )
    log_file: Optional[str] = Field(
        default=None, description="Append debug logs of every run to this file"
    )
