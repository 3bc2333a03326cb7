"""wiregen - IDL compiler for message-oriented wire protocols."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("wiregen")
except PackageNotFoundError:
    __version__ = "(local)"
