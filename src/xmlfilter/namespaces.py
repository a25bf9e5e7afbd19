"""
Single-prefix namespace binding built from an ``xmlns:prefix="URI"`` string.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from .errors import NamespaceDeclarationError

# Reserved "no namespace" URI, returned for every prefix that is not bound.
NO_NAMESPACE = ""


class _Unsupported:
    def __repr__(self) -> str:
        return "UNSUPPORTED"

    def __bool__(self) -> bool:
        return False


UNSUPPORTED = _Unsupported()


def _strip_quote_pair(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


@dataclass(frozen=True)
class NamespaceBinding:
    """
    One prefix bound to one URI, or nothing at all.

    Only the declared prefix resolves; every other prefix maps to
    :data:`NO_NAMESPACE`. Reverse lookups are not supported and say so.
    """

    prefix: str = ""
    uri: str = ""

    @classmethod
    def parse(
        cls, declaration: Optional[str], strip_quotes: bool = False
    ) -> "NamespaceBinding":
        """
        Build a binding from ``xmlns:<prefix>=<uri>``.

        The string is split once on ``:`` and the remainder once on ``=``.
        Quote characters around the URI are kept unless *strip_quotes* is set.
        """
        if not declaration:
            return cls()

        marker_and_rest = declaration.split(":", 1)
        if len(marker_and_rest) < 2:
            raise NamespaceDeclarationError(
                f"Namespace declaration '{declaration}' has no ':' "
                "(expected xmlns:prefix=\"URI\")"
            )
        prefix_and_uri = marker_and_rest[1].split("=", 1)
        if len(prefix_and_uri) < 2:
            raise NamespaceDeclarationError(
                f"Namespace declaration '{declaration}' has no '=' "
                "(expected xmlns:prefix=\"URI\")"
            )

        prefix, uri = prefix_and_uri
        if not prefix:
            raise NamespaceDeclarationError(
                f"Namespace declaration '{declaration}' binds an empty prefix"
            )
        if strip_quotes:
            uri = _strip_quote_pair(uri)
        if not uri:
            raise NamespaceDeclarationError(
                f"Namespace declaration '{declaration}' binds an empty URI"
            )
        return cls(prefix=prefix, uri=uri)

    @property
    def is_empty(self) -> bool:
        return not self.prefix

    def resolve(self, prefix: str) -> str:
        if not self.is_empty and prefix == self.prefix:
            return self.uri
        return NO_NAMESPACE

    def prefix_for(self, uri: str) -> _Unsupported:
        return UNSUPPORTED

    def prefixes_for(self, uri: str) -> _Unsupported:
        return UNSUPPORTED

    def as_xpath_namespaces(self) -> Dict[str, str]:
        """Prefix map in the form ``lxml.etree.XPath`` expects."""
        if self.is_empty:
            return {}
        return {self.prefix: self.uri}

    def __str__(self) -> str:
        if self.is_empty:
            return "(no namespace)"
        return f"xmlns:{self.prefix}={self.uri}"
