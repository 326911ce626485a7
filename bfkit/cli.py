from __future__ import annotations

import argparse
import sys
from typing import BinaryIO, Optional, TextIO

from .bf_interpreter import BrainfuckInterpreter, StepLimitExceeded
from .c_generator import transpile
from .config import DEFAULT_MEM_SIZE, Config
from .console import ConsoleSession, run_console
from .errors import BrainfuckError
from .keyboard import to_input_bytes
from .source import load_code
from .toolchain import RunResult, compile_c

BOLD = "\x1b[1m"
RED = "\x1b[91m"
GREEN = "\x1b[92m"
GREY = "\x1b[90m"
CYAN = "\x1b[96m"
RESET = "\x1b[0m"


def _status(message: str) -> None:
    print(f"{BOLD}{message}{RESET}", file=sys.stderr)


def _error(message: object) -> int:
    print(f"{RED}Error{RESET}: {message}", file=sys.stderr)
    return 1


class ByteWriter:
    """Writes program output to a binary stream, one byte per cell value."""

    def __init__(self, text_stream: TextIO) -> None:
        self._text = text_stream
        self._buffer: BinaryIO = text_stream.buffer

    def write(self, text: str) -> int:
        # Anything already queued on the text layer has to land first.
        self._text.flush()
        return self._buffer.write(text.encode("latin-1"))

    def flush(self) -> None:
        self._buffer.flush()


def program_stream(text_stream: TextIO) -> "ByteWriter | TextIO":
    """Return a writer whose bytes match what the generated C would print."""
    if hasattr(text_stream, "buffer"):
        return ByteWriter(text_stream)
    return text_stream


def _banner(title: str) -> str:
    return f"{GREY}--------------{RESET}{CYAN}{title}{RESET}{GREY}--------------{RESET}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bfkit",
        description="Brainfuck interpreter, C transpiler and console",
    )
    parser.add_argument("file", nargs="?", help="Brainfuck source file (*.bf); omit to open the console")
    parser.add_argument("-k", "--keep", action="store_true", help="Keep the generated C file")
    parser.add_argument("-o", "--output", default="output", help="Name of the compiled binary (default: output)")
    parser.add_argument("-c", "--compiler", default="gcc", help="C compiler to invoke (default: gcc)")
    parser.add_argument("-r", "--run", action="store_true", help="Run the program after compiling")
    parser.add_argument(
        "-i",
        "--interpret",
        action="store_true",
        help="Interpret the program instead of compiling it",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Enable the debug symbols: '#' dumps the current cell, '$' the cells around it",
    )
    parser.add_argument(
        "-m",
        "--mem-size",
        type=int,
        default=DEFAULT_MEM_SIZE,
        help=f"Number of tape cells (default: {DEFAULT_MEM_SIZE})",
    )
    parser.add_argument(
        "-rl",
        "--release",
        action="store_true",
        help="Compile in release mode (drops debug code)",
    )
    parser.add_argument(
        "-po",
        "--ptr-offset",
        type=int,
        default=0,
        help="Starting pointer offset from the start of the tape (default: 0)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Keep every character of the source; unknown ones become errors",
    )
    parser.add_argument(
        "--emit-c",
        action="store_true",
        help="Print the generated C source instead of compiling it",
    )
    parser.add_argument(
        "--input",
        default=None,
        help="Feed this string to ',' instead of reading keystrokes (interpreter only)",
    )
    parser.add_argument("--max-steps", type=int, default=None, help="Abort after this many instructions")
    return parser


def config_from_args(args: argparse.Namespace) -> Config:
    return Config(
        mem_size=args.mem_size,
        offset=args.ptr_offset,
        debug=args.debug,
        release=args.release,
        verbose=args.verbose,
        compiler=args.compiler,
        output=args.output,
        keep=args.keep,
        run=args.run,
        interpret=args.interpret,
        max_steps=args.max_steps,
    ).validate()


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = config_from_args(args)
    except BrainfuckError as exc:
        return _error(exc)

    if args.file is None:
        _status("Running brainfuck interpreter in console...")
        run_console(ConsoleSession(config, stream=program_stream(sys.stdout)))
        return 0

    _status(f"Getting file contents from {args.file}...")
    try:
        code = load_code(args.file, verbose=config.verbose)
    except (OSError, ValueError, BrainfuckError) as exc:
        return _error(exc)

    if config.interpret:
        return _interpret(code, config, args.input)
    return _transpile(code, config, emit_only=args.emit_c)


def _interpret(code: str, config: Config, input_text: Optional[str]) -> int:
    _status("Interpreting the code...")
    interpreter = BrainfuckInterpreter.from_config(config, stream=program_stream(sys.stdout))
    input_data = to_input_bytes(input_text) if input_text is not None else None
    try:
        interpreter.run(code, input_data=input_data, max_steps=config.max_steps)
    except (BrainfuckError, StepLimitExceeded) as exc:
        sys.stdout.flush()
        return _error(exc)
    sys.stdout.flush()
    return 0


def _transpile(code: str, config: Config, emit_only: bool) -> int:
    _status("Transpiling the code to C...")
    try:
        c_source = transpile(code, config)
    except BrainfuckError as exc:
        return _error(exc)

    if emit_only:
        sys.stdout.write(c_source)
        return 0

    _status(f"Compiling the C file using {config.compiler}...")
    try:
        result = compile_c(c_source, config)
    except (OSError, BrainfuckError) as exc:
        return _error(exc)
    if result.diagnostics:
        sys.stderr.write(result.diagnostics)
    if not result.success:
        return _error(f"{config.compiler} exited with status {result.returncode}")
    if result.kept_source:
        _status(f"Kept the C file at {result.c_path}")
    if result.run is not None:
        _report_run(result.run)
        return 0 if result.run.success else 1
    return 0


def _report_run(run: RunResult) -> None:
    _status("Running the program...")
    print(f"\n{_banner('STDOUT')}\n")
    program_stream(sys.stdout).write(run.stdout)
    if run.stderr:
        print(f"\n{_banner('STDERR')}\n")
        sys.stdout.write(f"{RED}{run.stderr}{RESET}")
    print(f"\n{GREY}----------------------------------{RESET}")
    colour = GREEN if run.success else RED
    print(f"{BOLD}Program ended with {RESET}{colour}exit status {run.returncode}{RESET}")


if __name__ == "__main__":
    raise SystemExit(main())
