"""Identifier case conversion for generated code."""

import keyword
import re

# A word is a run of capitals before a capitalised word ("HTTPServer"), a
# lower-case run with trailing digit groups ("rgb565a8", "v1"), a capital run
# with trailing digits ("ARGB8888"), or a run starting with a digit ("180").
_WORD = re.compile(
    r"[A-Z]+(?=[A-Z][a-z])"
    r"|[A-Z]?[a-z]+(?:[0-9]+[a-z]*)*"
    r"|[A-Z]+[0-9]*"
    r"|[0-9][0-9a-z]*"
)


def words(identifier: str) -> list[str]:
    """Split an identifier written in any case convention into words."""
    return _WORD.findall(identifier)


def _escape(name: str) -> str:
    if keyword.iskeyword(name):
        return name + "_"
    return name


def type_name(identifier: str) -> str:
    """Convert to a class name: ``wl_output`` -> ``WlOutput``."""
    return _escape("".join(w.capitalize() for w in words(identifier)))


def member_name(identifier: str) -> str:
    """Convert to a method, argument or attribute name: ``setTitle`` -> ``set_title``."""
    return _escape("_".join(w.lower() for w in words(identifier)))


def constant_name(identifier: str) -> str:
    """Convert to a constant name: ``top_left`` -> ``TOP_LEFT``."""
    return "_".join(w.upper() for w in words(identifier))


def module_name(identifier: str) -> str:
    """Convert to a module (file) name: ``xdg-shell`` -> ``xdg_shell``."""
    return _escape("_".join(w.lower() for w in words(identifier)))


def title(text: str) -> str:
    """Convert to a title for documentation headers: ``wl_output`` -> ``Wl Output``."""
    return " ".join(w.capitalize() for w in words(text))


def entry_constant(enum_name: str, entry_name: str) -> str:
    """Constant name of an enum entry.

    Entries starting with a digit are not identifiers on their own, so they
    are prefixed with the enum name: ``transform`` / ``180`` -> ``TRANSFORM_180``.
    """
    if entry_name[:1].isdigit():
        return constant_name(f"{enum_name}_{entry_name}")
    return constant_name(entry_name)
