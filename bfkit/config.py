from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .errors import ConfigurationError

DEFAULT_MEM_SIZE = 30000


@dataclass
class Config:
    mem_size: int = DEFAULT_MEM_SIZE
    offset: int = 0
    debug: bool = False
    release: bool = False
    verbose: bool = False
    compiler: str = "gcc"
    output: str = "output"
    keep: bool = False
    run: bool = False
    interpret: bool = False
    max_steps: Optional[int] = None

    @property
    def debug_codegen(self) -> bool:
        # Release builds never carry debug statements.
        return self.debug and not self.release

    def validate(self) -> "Config":
        if self.mem_size < 1:
            raise ConfigurationError("memory size must be at least 1")
        if self.offset < 0:
            raise ConfigurationError("pointer offset cannot be negative")
        if self.offset >= self.mem_size:
            raise ConfigurationError("pointer offset cannot be greater than memory size")
        if self.max_steps is not None and self.max_steps < 1:
            raise ConfigurationError("step limit must be positive")
        if not self.output:
            raise ConfigurationError("output name cannot be empty")
        return self


__all__ = ["Config", "DEFAULT_MEM_SIZE"]
