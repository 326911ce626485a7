from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional, TextIO

from .bf_interpreter import BrainfuckInterpreter, StepLimitExceeded, Tape, format_window
from .config import Config
from .errors import BrainfuckError
from .keyboard import KeySource, getch
from .source import prepare

PROMPT = ">>> "


@dataclass
class ConsoleSession:
    """A tape that outlives individual evaluations."""

    config: Config = field(default_factory=Config)
    read_key: KeySource = field(default=getch, repr=False)
    stream: Optional[TextIO] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.config.validate()
        self.interpreter = BrainfuckInterpreter.from_config(
            self.config,
            read_key=self.read_key,
            stream=self.stream,
        )
        self.tape: Tape = self.interpreter.new_tape()
        self.evaluations = 0

    def evaluate(self, text: str, input_data: Optional[Iterable[int]] = None) -> str:
        self.interpreter.output_buffer = []
        code = prepare(text, verbose=self.config.verbose)
        self.evaluations += 1
        return self.interpreter.execute(
            code,
            self.tape,
            input_data=input_data,
            max_steps=self.config.max_steps,
        )

    def reset(self) -> None:
        self.tape = self.interpreter.new_tape()
        self.evaluations = 0

    @property
    def last_output(self) -> str:
        return self.interpreter.output

    def describe_tape(self) -> str:
        return format_window(self.tape, self.config.mem_size)


def run_console(session: ConsoleSession, read_line: Callable[[str], str] = input) -> None:
    out = session.stream or sys.stdout
    print("bfkit console (type 'help' for commands)", file=out)
    while True:
        try:
            line = read_line(PROMPT).strip()
        except (EOFError, KeyboardInterrupt):
            print(file=out)
            break
        if not line:
            continue
        command = line.lower()
        if command in {"quit", "exit"}:
            break
        if command == "help":
            _print_help(out)
            continue
        if command == "reset":
            session.reset()
            print("Tape reset.", file=out)
            continue
        if command == "tape":
            print(session.describe_tape(), file=out)
            continue
        try:
            session.evaluate(line)
        except KeyboardInterrupt:
            _echo_output(session, out)
            print(file=out)
            break
        except (BrainfuckError, StepLimitExceeded) as exc:
            _echo_output(session, out)
            print(f"\nError: {exc}", file=sys.stderr)
            continue
        _echo_output(session, out)
        print(file=out)


def _echo_output(session: ConsoleSession, out: TextIO) -> None:
    # Without a stream the interpreter only buffers what it printed.
    if session.stream is None:
        out.write(session.last_output)


def _print_help(out: TextIO) -> None:
    print(
        "Commands:\n"
        "  <code>     : evaluate Brainfuck against the current tape\n"
        "  tape       : show the cells around the pointer\n"
        "  reset      : start again with an empty tape\n"
        "  help       : show this message\n"
        "  quit/exit  : leave the console",
        file=out,
    )


__all__ = ["ConsoleSession", "PROMPT", "run_console"]
