from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .config import Config
from .errors import ToolchainError


@dataclass
class RunResult:
    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        return self.returncode == 0


@dataclass
class CompileResult:
    c_path: Path
    binary_path: Path
    diagnostics: str
    returncode: int
    kept_source: bool
    run: Optional[RunResult] = None

    @property
    def success(self) -> bool:
        return self.returncode == 0


def _decode(data: bytes) -> str:
    return data.decode("latin-1")


def compile_c(c_source: str, config: Config) -> CompileResult:
    """Write ``c_source`` next to the configured output and build it.

    The generated file is removed afterwards unless ``config.keep`` is set;
    with ``config.run`` the binary is executed once the build succeeds.
    """
    binary_path = Path(config.output)
    c_path = binary_path.with_name(binary_path.name + ".c")
    c_path.write_text(c_source, encoding="utf-8")

    command = [config.compiler, str(c_path), "-o", str(binary_path)]
    try:
        completed = subprocess.run(command, capture_output=True)
    except OSError as exc:
        raise ToolchainError(f"Could not start compiler '{config.compiler}': {exc}") from exc
    finally:
        if not config.keep:
            c_path.unlink(missing_ok=True)

    result = CompileResult(
        c_path=c_path,
        binary_path=binary_path,
        diagnostics=_decode(completed.stderr),
        returncode=completed.returncode,
        kept_source=config.keep,
    )
    if config.run and result.success:
        result.run = run_binary(binary_path)
    return result


def run_binary(binary_path: Path) -> RunResult:
    target = binary_path if binary_path.is_absolute() else Path(".") / binary_path
    try:
        completed = subprocess.run([str(target.resolve())], capture_output=True)
    except OSError as exc:
        raise ToolchainError(f"Could not run '{binary_path}': {exc}") from exc
    return RunResult(
        stdout=_decode(completed.stdout),
        stderr=_decode(completed.stderr),
        returncode=completed.returncode,
    )


__all__ = ["CompileResult", "RunResult", "compile_c", "run_binary"]
