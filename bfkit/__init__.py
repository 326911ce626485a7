from .bf_interpreter import BrainfuckInterpreter, StepLimitExceeded, Tape
from .c_generator import generate_c, transpile
from .config import Config
from .console import ConsoleSession
from .errors import (
    BrainfuckError,
    ConfigurationError,
    InvalidCharacterError,
    TapeBoundsError,
    ToolchainError,
    UnbalancedBracketsError,
)
from .jumps import JumpTable, build_jump_table
from .optimizer import expand, optimize

__version__ = "0.1.0"

__all__ = [
    "BrainfuckError",
    "BrainfuckInterpreter",
    "Config",
    "ConfigurationError",
    "ConsoleSession",
    "InvalidCharacterError",
    "JumpTable",
    "StepLimitExceeded",
    "Tape",
    "TapeBoundsError",
    "ToolchainError",
    "UnbalancedBracketsError",
    "build_jump_table",
    "expand",
    "generate_c",
    "optimize",
    "transpile",
]
