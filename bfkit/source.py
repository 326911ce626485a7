from __future__ import annotations

from pathlib import Path

from .errors import UnbalancedBracketsError

COMMANDS = "<>+-.,[]"
DEBUG_COMMANDS = "#$"
ALPHABET = COMMANDS + DEBUG_COMMANDS

SOURCE_SUFFIX = ".bf"


def read_source(path: str) -> str:
    source_path = Path(path)
    if source_path.suffix != SOURCE_SUFFIX:
        raise ValueError(f"File must end with {SOURCE_SUFFIX}")
    if not source_path.exists():
        raise FileNotFoundError(f"Source file not found: {path}")
    return source_path.read_text(encoding="utf-8")


def sanitize(text: str) -> str:
    """Drop everything that is not an instruction or a debug symbol."""
    return "".join(ch for ch in text if ch in ALPHABET)


def check_brackets(code: str) -> str:
    """Reject programs whose loop markers do not pair up.

    A ``]`` that closes nothing is rejected along with mismatched counts, so
    the jump table builder never sees a stream it cannot match.
    """
    if code.count("[") != code.count("]"):
        raise UnbalancedBracketsError("Unbalanced Brackets")
    depth = 0
    for position, char in enumerate(code):
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
            if depth < 0:
                raise UnbalancedBracketsError(f"Unbalanced Brackets: unmatched ']' at position {position}")
    return code


def prepare(text: str, verbose: bool = False) -> str:
    code = text if verbose else sanitize(text)
    return check_brackets(code)


def load_code(path: str, verbose: bool = False) -> str:
    return prepare(read_source(path), verbose=verbose)


__all__ = [
    "ALPHABET",
    "COMMANDS",
    "DEBUG_COMMANDS",
    "check_brackets",
    "load_code",
    "prepare",
    "read_source",
    "sanitize",
]
