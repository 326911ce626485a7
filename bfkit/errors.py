from __future__ import annotations

from typing import Optional


class BrainfuckError(Exception):
    """Base class for every failure reported by bfkit."""


class UnbalancedBracketsError(BrainfuckError):
    pass


class TapeBoundsError(BrainfuckError, IndexError):
    pass


class InvalidCharacterError(BrainfuckError):
    def __init__(self, char: str, position: Optional[int] = None) -> None:
        self.char = char
        self.position = position
        message = f"Invalid character {char!r}"
        if position is not None:
            message += f" at position {position}"
        super().__init__(message)


class ConfigurationError(BrainfuckError):
    pass


class ToolchainError(BrainfuckError):
    pass


__all__ = [
    "BrainfuckError",
    "ConfigurationError",
    "InvalidCharacterError",
    "TapeBoundsError",
    "ToolchainError",
    "UnbalancedBracketsError",
]
