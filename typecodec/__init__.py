"""Typecodec - Parser and encoder for Objective-C type encodings."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("typecodec")
except PackageNotFoundError:
    __version__ = "(local)"
