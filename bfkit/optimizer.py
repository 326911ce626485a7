from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .errors import InvalidCharacterError
from .source import ALPHABET

# Stand-in for the "[-]" / "[+]" idiom between the two phases.
CLEAR = "c"

_INVERSE = {">": "<", "<": ">", "+": "-", "-": "+"}
_CELL_OPS = "+-,c"
_MOVES = "<>"


# === Tokens ===


class Token:
    pass


@dataclass
class Move(Token):
    offset: int


@dataclass
class Add(Token):
    amount: int


@dataclass
class Set(Token):
    value: int


@dataclass
class Read(Token):
    count: int
    amount: int = 0


@dataclass
class Command(Token):
    symbol: str


# === Phase 1 ===


def normalize(code: str) -> List[str]:
    """Cancel inverse neighbours and fold clear loops in one stack pass.

    Removing a pair only ever exposes the previous top of the stack, so a
    single pass reaches the same result as rewriting until nothing changes.
    """
    stack: List[str] = []
    for position, char in enumerate(code):
        if char not in ALPHABET:
            raise InvalidCharacterError(char, position)
        if stack and _INVERSE.get(char) == stack[-1]:
            stack.pop()
            continue
        if char == "]" and len(stack) >= 2 and stack[-2] == "[" and stack[-1] in "+-":
            del stack[-2:]
            stack.append(CLEAR)
            continue
        stack.append(char)
    return stack


# === Phase 2 ===


def coalesce(symbols: List[str]) -> List[Token]:
    tokens: List[Token] = []
    length = len(symbols)
    index = 0
    while index < length:
        symbol = symbols[index]
        if symbol in _MOVES:
            offset = 0
            while index < length and symbols[index] in _MOVES:
                offset += 1 if symbols[index] == ">" else -1
                index += 1
            if offset:
                tokens.append(Move(offset))
            continue
        if symbol in _CELL_OPS:
            end = index
            while end < length and symbols[end] in _CELL_OPS:
                end += 1
            tokens.extend(_coalesce_cell_run(symbols[index:end]))
            index = end
            continue
        tokens.append(Command(symbol))
        index += 1
    return tokens


def _coalesce_cell_run(run: List[str]) -> List[Token]:
    reads = 0
    cleared = False
    amount = 0
    for symbol in run:
        if symbol == "+":
            amount += 1
        elif symbol == "-":
            amount -= 1
        elif symbol == ",":
            reads += 1
            cleared = False
            amount = 0
        else:
            cleared = True
            amount = 0
    if cleared:
        tokens: List[Token] = [Read(reads)] if reads else []
        tokens.append(Set(amount % 256))
        return tokens
    if reads:
        return [Read(reads, amount)]
    if amount % 256:
        return [Add(amount)]
    return []


def optimize(code: str) -> List[Token]:
    return coalesce(normalize(code))


def expand(tokens: List[Token]) -> str:
    """Spell optimized tokens back out as plain instructions."""
    parts: List[str] = []
    for token in tokens:
        if isinstance(token, Move):
            parts.append(">" * token.offset if token.offset > 0 else "<" * -token.offset)
        elif isinstance(token, Add):
            parts.append("+" * token.amount if token.amount > 0 else "-" * -token.amount)
        elif isinstance(token, Set):
            parts.append("[-]" + "+" * token.value)
        elif isinstance(token, Read):
            parts.append("," * token.count)
            parts.append("+" * token.amount if token.amount > 0 else "-" * -token.amount)
        elif isinstance(token, Command):
            parts.append(token.symbol)
        else:
            raise TypeError(f"Unknown token {token!r}")
    return "".join(parts)


__all__ = [
    "Add",
    "Command",
    "Move",
    "Read",
    "Set",
    "Token",
    "coalesce",
    "expand",
    "normalize",
    "optimize",
]
