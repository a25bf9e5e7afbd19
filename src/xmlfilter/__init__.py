"""
xmlfilter - Copy the XML files of a directory that match an XPath expression.

This package scans a directory for XML files, evaluates a single XPath 1.0
expression (optionally with one namespace prefix bound) against each of them,
and copies the files containing at least one matching node to a destination
directory.
"""

__version__ = "0.1.0"
__author__ = "xmlfilter Team"
