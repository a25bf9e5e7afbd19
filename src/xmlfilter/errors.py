"""
Exceptions raised by xmlfilter.
"""

from __future__ import annotations

from pathlib import Path


class XmlFilterError(Exception):
    """Base exception for xmlfilter errors."""
    pass


class ArgumentError(XmlFilterError):
    """Raised when the command line cannot be parsed."""
    pass


class DirectoryError(XmlFilterError):
    """Raised when an input or output path is missing or not a directory."""
    pass


class ConfigFileError(XmlFilterError):
    """Raised when there are issues with the exclusion pattern file."""
    pass


class EmptyInputError(XmlFilterError):
    """Raised when the input directory holds no candidate XML files."""
    pass


class NamespaceDeclarationError(XmlFilterError):
    """Raised when a namespace declaration is not of the form xmlns:prefix=URI."""
    pass


InvalidNamespaceDeclaration = NamespaceDeclarationError


class QueryCompilationError(XmlFilterError):
    """Raised when the XPath expression cannot be compiled."""
    pass


class DocumentParseError(XmlFilterError):
    """A single candidate file could not be parsed."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not parse '{path.name}': {reason}")


class NoMatchError(XmlFilterError):
    """Raised when no candidate file matches the XPath expression."""
    pass


class CopyError(XmlFilterError):
    """A selected file could not be copied to the destination."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not copy '{path.name}': {reason}")
