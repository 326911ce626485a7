from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .bf_interpreter import WINDOW_RADIUS
from .config import DEFAULT_MEM_SIZE, Config
from .errors import InvalidCharacterError
from .optimizer import Add, Command, Move, Read, Set, Token, optimize

_PREAMBLE = """\
#include <stdio.h>
#include <termios.h>

int getch(void) {{
    struct termios old, new;
    int ch;
    tcgetattr(0, &old);
    new = old;
    new.c_lflag &= ~ICANON;
    new.c_lflag &= ~ECHO;
    tcsetattr(0, TCSANOW, &new);
    ch = getchar();
    tcsetattr(0, TCSANOW, &old);
    return ch == EOF ? 0 : ch;
}}

int main(void) {{
    static unsigned char mem[{mem_size}];
    unsigned char *ptr = mem + {offset};
"""

_DEBUG_DECLARATIONS = "    unsigned int debug_count = 0;\n"

_POSTAMBLE = """\
    return 0;
}
"""

_CELL_DUMP = 'debug_count += 1; printf("\\ndebug flag %u : %c %d %ld\\n", debug_count, *ptr, *ptr, (long)(ptr - mem));'

_WINDOW_DUMP = (
    "{{ long here = ptr - mem; long lo = here - {radius}; long hi = here + {radius}; long i;",
    "if (lo < 0) lo = 0;",
    "if (hi > {last}) hi = {last};",
    'printf("\\nwindow %ld : ", here);',
    "for (i = lo; i <= hi; i++) {{",
    "    if (i > lo) putchar(' ');",
    '    printf(i == here ? "[%ld:%03d]" : "%ld:%03d", i, mem[i]);',
    "}}",
    'putchar(\'\\n\'); }}',
)


@dataclass
class CodeGenState:
    debug: bool
    mem_size: int
    output: List[str] = field(default_factory=list)
    depth: int = 1

    def line(self, text: str) -> None:
        self.output.append("    " * self.depth + text + "\n")


def generate_c(
    tokens: List[Token],
    *,
    debug: bool = False,
    mem_size: int = DEFAULT_MEM_SIZE,
    offset: int = 0,
) -> str:
    state = CodeGenState(debug=debug, mem_size=mem_size)
    state.output.append(_PREAMBLE.format(mem_size=mem_size, offset=offset))
    if debug:
        state.output.append(_DEBUG_DECLARATIONS)
    state.output.append("\n")
    for token in tokens:
        _emit_token(token, state)
    if state.depth != 1:
        raise RuntimeError("Unclosed loop reached the code generator")
    state.output.append(_POSTAMBLE)
    return "".join(state.output)


def _emit_token(token: Token, state: CodeGenState) -> None:
    if isinstance(token, Move):
        _emit_offset("ptr", token.offset, state)
    elif isinstance(token, Add):
        _emit_offset("*ptr", token.amount, state)
    elif isinstance(token, Set):
        state.line(f"*ptr = {token.value % 256};")
    elif isinstance(token, Read):
        for _ in range(token.count):
            state.line("*ptr = getch();")
        _emit_offset("*ptr", token.amount, state)
    elif isinstance(token, Command):
        _emit_command(token.symbol, state)
    else:
        raise TypeError(f"Unknown token {token!r}")


def _emit_offset(target: str, amount: int, state: CodeGenState) -> None:
    if amount > 0:
        state.line(f"{target} += {amount};")
    elif amount < 0:
        state.line(f"{target} -= {-amount};")


def _emit_command(symbol: str, state: CodeGenState) -> None:
    if symbol == ".":
        state.line("putchar(*ptr);")
    elif symbol == "[":
        state.line("while (*ptr) {")
        state.depth += 1
    elif symbol == "]":
        if state.depth == 1:
            raise RuntimeError("Unmatched ']' reached the code generator")
        state.depth -= 1
        state.line("}")
    elif symbol == "#":
        if state.debug:
            state.line(_CELL_DUMP)
    elif symbol == "$":
        if state.debug:
            for text in _WINDOW_DUMP:
                state.line(text.format(radius=WINDOW_RADIUS, last=state.mem_size - 1))
    else:
        raise InvalidCharacterError(symbol)


def transpile(code: str, config: Config) -> str:
    return generate_c(
        optimize(code),
        debug=config.debug_codegen,
        mem_size=config.mem_size,
        offset=config.offset,
    )


__all__ = ["CodeGenState", "generate_c", "transpile"]
