"""Value-domain providers -- where option argument candidates come from.

The resolver depends only on the :class:`ValueProvider` interface. Three
implementations cover the domain kinds of :class:`~peercomp.models.DomainKind`:

* :class:`EnumProvider` -- the declared literal values, in declared order.
* :class:`PathProvider` -- delegates to an injected path-completion
  capability (any ``Callable[[str], Iterable[str]]``), by default
  :class:`FilesystemPathCompleter`.
* :class:`NoneProvider` -- flags without an argument; always empty.

Providers return unfiltered candidates; narrowing by the current token is
done by :mod:`peercomp.completion.formatter`. A provider that cannot produce
candidates raises :class:`~peercomp.exceptions.ProviderUnavailableError`.
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from typing import Callable, Iterable, Optional

from peercomp.exceptions import ProviderUnavailableError
from peercomp.models import DomainKind, PathConfig, ValueDomain

logger = logging.getLogger(__name__)

PathCompleter = Callable[[str], Iterable[str]]
"""Signature of the external path-completion capability: prefix in, paths out."""


class ValueProvider(ABC):
    """Source of candidate strings for one value-domain kind."""

    @abstractmethod
    def candidates(self, domain: ValueDomain, current: str) -> list[str]:
        """Return the candidates for *domain* given the token being typed.

        Args:
            domain: The value domain of the option being completed.
            current: The token under the cursor, used only as a hint.

        Raises:
            ProviderUnavailableError: If no candidates can be produced.
        """
        ...


class NoneProvider(ValueProvider):
    def candidates(self, domain: ValueDomain, current: str) -> list[str]:
        return []


class EnumProvider(ValueProvider):
    """Returns the domain's declared values as-is."""

    def candidates(self, domain: ValueDomain, current: str) -> list[str]:
        if not domain.values:
            raise ProviderUnavailableError("Enumeration domain declares no values")
        return list(domain.values)


class PathProvider(ValueProvider):
    """Delegates to a path-completion capability with *current* as the prefix.

    Args:
        completer: The capability to delegate to. Defaults to a
            :class:`FilesystemPathCompleter` with default settings.
    """

    def __init__(self, completer: Optional[PathCompleter] = None) -> None:
        self._completer = completer or FilesystemPathCompleter()

    def candidates(self, domain: ValueDomain, current: str) -> list[str]:
        try:
            return list(self._completer(current))
        except OSError as exc:
            raise ProviderUnavailableError(
                f"Path completion failed for {current!r}: {exc}"
            ) from exc


class FilesystemPathCompleter:
    """Lists filesystem entries matching a typed path prefix, like ``compgen -f``.

    The directory part of the prefix (``.`` when there is none) is listed
    with :func:`os.scandir` and every entry whose name starts with the
    basename part is returned, joined back onto the directory part exactly as
    the user typed it. ``~`` is expanded for listing only. Entries come back
    in directory order.

    A missing directory yields no candidates. Other listing errors (e.g.
    permission denied) propagate as :class:`OSError`.

    Args:
        mark_directories: Append ``/`` to directory entries.
        show_hidden: Offer dot-entries even when the basename being typed
            does not start with ``.``.
    """

    def __init__(self, mark_directories: bool = False, show_hidden: bool = True) -> None:
        self.mark_directories = mark_directories
        self.show_hidden = show_hidden

    @classmethod
    def from_config(cls, config: PathConfig) -> FilesystemPathCompleter:
        return cls(
            mark_directories=config.mark_directories,
            show_hidden=config.show_hidden,
        )

    def __call__(self, prefix: str) -> list[str]:
        typed_dir, _, partial = prefix.rpartition("/")
        if prefix.startswith("/") and not typed_dir:
            typed_dir = "/"
        list_dir = os.path.expanduser(typed_dir) if typed_dir else "."
        hide_dots = not self.show_hidden and not partial.startswith(".")

        results: list[str] = []
        try:
            with os.scandir(list_dir) as entries:
                for entry in entries:
                    if not entry.name.startswith(partial):
                        continue
                    if hide_dots and entry.name.startswith("."):
                        continue
                    if typed_dir == "/":
                        candidate = "/" + entry.name
                    elif typed_dir:
                        candidate = f"{typed_dir}/{entry.name}"
                    else:
                        candidate = entry.name
                    if self.mark_directories and _is_dir(entry):
                        candidate += "/"
                    results.append(candidate)
        except (FileNotFoundError, NotADirectoryError):
            logger.debug("No directory to list for prefix %r", prefix)
            return []
        return results


def _is_dir(entry: os.DirEntry[str]) -> bool:
    try:
        return entry.is_dir()
    except OSError:
        return False


def provider_for(
    domain: ValueDomain, path_completer: Optional[PathCompleter] = None
) -> ValueProvider:
    """Return the provider serving *domain*'s kind."""
    if domain.kind == DomainKind.ENUM:
        return EnumProvider()
    if domain.kind == DomainKind.PATH:
        return PathProvider(path_completer)
    return NoneProvider()
