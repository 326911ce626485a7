from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List


@dataclass
class JumpTable:
    closers: Dict[int, int] = field(default_factory=dict)
    openers: Dict[int, int] = field(default_factory=dict)

    def match(self, position: int) -> int:
        if position in self.closers:
            return self.closers[position]
        return self.openers[position]

    def __len__(self) -> int:
        return len(self.closers)


def build_jump_table(code: Iterable[str]) -> JumpTable:
    table = JumpTable()
    stack: List[int] = []
    for index, char in enumerate(code):
        if char == "[":
            stack.append(index)
        elif char == "]":
            if not stack:
                raise RuntimeError(f"Unmatched ']' at position {index} reached the jump table")
            start = stack.pop()
            table.closers[start] = index
            table.openers[index] = start
    if stack:
        raise RuntimeError(f"Unmatched '[' at position {stack.pop()} reached the jump table")
    return table


__all__ = ["JumpTable", "build_jump_table"]
