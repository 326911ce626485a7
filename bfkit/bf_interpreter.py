from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, TextIO, Tuple

from .config import DEFAULT_MEM_SIZE, Config
from .errors import InvalidCharacterError, TapeBoundsError
from .jumps import JumpTable, build_jump_table
from .keyboard import KeySource, getch, input_reader

WINDOW_RADIUS = 10


class StepLimitExceeded(RuntimeError):
    """Raised when Brainfuck execution exceeds the configured step budget."""


@dataclass
class Tape:
    """Cells and cursor of one machine; carried across calls by the console."""

    cells: List[int]
    pointer: int

    @classmethod
    def create(cls, offset: int = 0) -> "Tape":
        return cls(cells=[0] * (offset + 1), pointer=offset)

    @property
    def current(self) -> int:
        return self.cells[self.pointer]

    def window(self, mem_size: int, radius: int = WINDOW_RADIUS) -> List[Tuple[int, int]]:
        start = max(0, self.pointer - radius)
        end = min(mem_size - 1, self.pointer + radius)
        size = len(self.cells)
        return [(index, self.cells[index] if index < size else 0) for index in range(start, end + 1)]


def format_window(tape: Tape, mem_size: int, radius: int = WINDOW_RADIUS) -> str:
    parts: List[str] = []
    for index, value in tape.window(mem_size, radius):
        cell_repr = f"{index}:{value:03}"
        if index == tape.pointer:
            parts.append(f"[{cell_repr}]")
        else:
            parts.append(cell_repr)
    return f"window {tape.pointer} : " + " ".join(parts)


@dataclass
class BrainfuckInterpreter:
    mem_size: int = DEFAULT_MEM_SIZE
    offset: int = 0
    debug: bool = False
    read_key: KeySource = field(default=getch, repr=False)
    stream: Optional[TextIO] = field(default=None, repr=False)

    output_buffer: List[str] = field(init=False, repr=False)
    debug_count: int = field(init=False, repr=False)

    @classmethod
    def from_config(cls, config: Config, **kwargs) -> "BrainfuckInterpreter":
        return cls(mem_size=config.mem_size, offset=config.offset, debug=config.debug, **kwargs)

    def __post_init__(self) -> None:
        self.output_buffer = []
        self.debug_count = 0

    @property
    def output(self) -> str:
        return "".join(self.output_buffer)

    def new_tape(self) -> Tape:
        return Tape.create(self.offset)

    def run(
        self,
        code: str,
        input_data: Optional[Iterable[int]] = None,
        max_steps: Optional[int] = None,
    ) -> str:
        return self.execute(code, self.new_tape(), input_data=input_data, max_steps=max_steps)

    def execute(
        self,
        code: str,
        tape: Tape,
        input_data: Optional[Iterable[int]] = None,
        max_steps: Optional[int] = None,
    ) -> str:
        """Run ``code`` against ``tape`` in place and return what it printed.

        On failure the exception propagates; the tape keeps whatever state the
        program reached and ``output`` still holds the partial output.
        """
        self.output_buffer = []
        self.debug_count = 0
        read_key = self.read_key if input_data is None else input_reader(input_data)
        jump_table = build_jump_table(code)
        pc = 0
        steps = 0
        code_length = len(code)

        while pc < code_length:
            if max_steps is not None and steps >= max_steps:
                raise StepLimitExceeded("Brainfuck program exceeded allowed step count")
            pc = self._execute_instruction(code[pc], pc, tape, jump_table, read_key)
            steps += 1
        return self.output

    def _execute_instruction(
        self,
        command: str,
        pc: int,
        tape: Tape,
        jump_table: JumpTable,
        read_key: KeySource,
    ) -> int:
        new_pc = pc + 1
        if command == ">":
            if tape.pointer + 1 >= self.mem_size:
                raise TapeBoundsError(f"Memory index out of bound at position {pc}")
            tape.pointer += 1
            if tape.pointer == len(tape.cells):
                tape.cells.append(0)
        elif command == "<":
            if tape.pointer == 0:
                raise TapeBoundsError(f"Memory index out of bound at position {pc}")
            tape.pointer -= 1
        elif command == "+":
            tape.cells[tape.pointer] = (tape.cells[tape.pointer] + 1) % 256
        elif command == "-":
            tape.cells[tape.pointer] = (tape.cells[tape.pointer] - 1) % 256
        elif command == ".":
            self._emit(chr(tape.current))
        elif command == ",":
            tape.cells[tape.pointer] = read_key() & 0xFF
        elif command == "[":
            if tape.current == 0:
                new_pc = jump_table.match(pc) + 1
        elif command == "]":
            if tape.current != 0:
                new_pc = jump_table.match(pc) + 1
        elif command == "#":
            if self.debug:
                self.debug_count += 1
                value = tape.current
                self._emit(f"\ndebug flag {self.debug_count} : {chr(value)} {value} {tape.pointer}\n")
        elif command == "$":
            if self.debug:
                self._emit("\n" + format_window(tape, self.mem_size) + "\n")
        else:
            raise InvalidCharacterError(command, pc)
        return new_pc

    def _emit(self, text: str) -> None:
        self.output_buffer.append(text)
        if self.stream is not None:
            self.stream.write(text)
            self.stream.flush()


__all__ = [
    "BrainfuckInterpreter",
    "StepLimitExceeded",
    "Tape",
    "format_window",
]
