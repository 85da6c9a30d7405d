"""
Symbol directory for resolving ``$`` references.

A directory is built once per render from ``name:value`` declarations and is
read-only afterwards.
"""
import logging
from types import MappingProxyType
from typing import Iterable, Iterator, Optional, Tuple

from .exceptions import MalformedDocumentError, UnknownSymbolError
from .models import SIGIL, strip_sigil

logger = logging.getLogger(__name__)


def parse_declaration(declaration: str) -> Tuple[str, str]:
    """
    Split a ``name:value`` declaration on its first colon.

    Raises:
        MalformedDocumentError: If the declaration has no colon or no name
    """
    name, sep, value = declaration.strip().partition(":")
    name = name.strip()
    if not sep or not name:
        raise MalformedDocumentError(f"Invalid directory entry: {declaration!r}")
    return name, value.strip()


class SymbolDirectory:
    """Read-only mapping of symbol names to literal values."""

    def __init__(self, entries: Optional[Iterable[Tuple[str, str]]] = None):
        table = {}
        for name, value in entries or ():
            name = name.strip()
            if name in table:
                logger.debug(f"Directory entry {name!r} redefined")
            table[name] = value.strip()
        self._table = MappingProxyType(table)

    @classmethod
    def load(cls, entries: Iterable[Tuple[str, str]]) -> "SymbolDirectory":
        """
        Build a directory from ordered (name, value) pairs.

        Later duplicates replace earlier ones.
        """
        return cls(entries)

    @classmethod
    def from_declarations(cls, declarations: Iterable[str]) -> "SymbolDirectory":
        return cls(parse_declaration(d) for d in declarations)

    def resolve(self, ref: str) -> str:
        """
        Resolve a reference to its literal value.

        Args:
            ref: ``$name`` to look up, or a literal returned unchanged

        Raises:
            UnknownSymbolError: If a ``$`` reference has no entry
        """
        if not ref.startswith(SIGIL):
            return ref
        name = strip_sigil(ref)
        try:
            return self._table[name]
        except KeyError:
            raise UnknownSymbolError(name) from None

    def resolve_optional(self, ref: Optional[str]) -> Optional[str]:
        """Like resolve(), but an absent or empty reference stays None."""
        if ref is None or not ref.strip():
            return None
        return self.resolve(ref) or None

    def resolve_selector(self, method: str, method_signature: str) -> str:
        """
        Find the selector for a method.

        A literal ``0x`` method is already a selector. Anything else is looked
        up under its ``name(address,...)`` signature.
        """
        if method.lower().startswith("0x"):
            return method
        try:
            return self._table[method_signature]
        except KeyError:
            raise UnknownSymbolError(method_signature) from None

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._table.get(name, default)

    def __contains__(self, name: object) -> bool:
        return name in self._table

    def __len__(self) -> int:
        return len(self._table)

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __repr__(self) -> str:
        return f"SymbolDirectory({dict(self._table)!r})"
