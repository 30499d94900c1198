from __future__ import annotations

import logging
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence

from pretty_size.errors import SizeToolError

LOG = logging.getLogger("size_tool")

# SysV layout, decimal values
DEFAULT_SIZE_ARGS: Sequence[str] = ("-A", "-d")


@dataclass
class CommandResult:
    exit_code: int
    stdout: str
    stderr: str
    duration_ms: int


def run_command(command: List[str]) -> CommandResult:
    """Run a program and capture stdout, stderr, exit code, and duration."""
    start = time.perf_counter()
    try:
        process = subprocess.run(command, capture_output=True, check=False)
    except FileNotFoundError as exc:
        raise SizeToolError(command, f"program not found ({exc.strerror})") from exc
    except PermissionError as exc:
        raise SizeToolError(command, f"program not executable ({exc.strerror})") from exc

    duration_ms = int((time.perf_counter() - start) * 1000)
    return CommandResult(
        exit_code=process.returncode,
        stdout=process.stdout.decode(errors="replace"),
        stderr=process.stderr.decode(errors="replace"),
        duration_ms=duration_ms,
    )


def run_size_tool(
    size_prog: str,
    binary: str | Path,
    args: Sequence[str] = DEFAULT_SIZE_ARGS,
) -> str:
    """
    Run the size program against a binary and return its listing.

    Raises:
        FileNotFoundError: If the binary does not exist
        SizeToolError: If the program is missing or exits non-zero
    """
    binary_path = Path(binary)
    if not binary_path.exists():
        raise FileNotFoundError(f"{binary_path}: No such file")

    command = [size_prog, *args, str(binary_path)]
    result = run_command(command)
    LOG.debug("%s exited with %d in %d ms", size_prog, result.exit_code, result.duration_ms)

    if result.exit_code != 0:
        raise SizeToolError(command, f"exit code {result.exit_code}: {result.stderr.strip()}")
    return result.stdout
