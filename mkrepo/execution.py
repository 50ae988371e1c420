"""Async command execution utilities."""

import asyncio
import logging
import shlex
import subprocess
from pathlib import Path
from typing import Tuple

_logging = logging.getLogger(__name__)


def quote_command(*parts: str) -> str:
    """Join command parts into a shell string, quoting each one."""
    return " ".join(shlex.quote(str(p)) for p in parts)


async def run_command_async(
    command: str,
    cwd: Path | str | None = None,
    env: dict[str, str] | None = None,
    timeout: float | None = None,
    debug: bool = False,
) -> Tuple[str, int]:
    """Run a command asynchronously and return output and return code.

    On success the output is stdout. On failure it is stderr, or stdout when
    the tool wrote nothing to stderr. Spawn errors are reported as a
    non-zero return code rather than raised.
    """
    process = None
    try:
        if debug:
            _logging.debug(f"Running command: {command} (cwd={cwd or '.'})")
        process = await asyncio.create_subprocess_shell(
            command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(cwd) if cwd else None,
            env=env,
        )
        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=timeout
            )
        except asyncio.TimeoutError:
            process.kill()
            _ = await process.wait()
            _logging.error(f"Command timed out after {timeout} seconds: {command}")
            return f"Command timed out after {timeout} seconds", 1

        output = stdout.decode(errors="replace").strip()
        errors = stderr.decode(errors="replace").strip()
        if errors and debug:
            _logging.debug(f"stderr: {errors}")
        returncode = process.returncode if process.returncode is not None else 1
        if returncode != 0:
            return errors or output, returncode
        return output, returncode
    except Exception as e:
        _logging.error(
            f"Command execution failed: {type(e).__name__}: {e} | Command: {command}"
        )
        return f"Error: {str(e)}", 1
    finally:
        if process:
            transport = getattr(process, "_transport", None)
            if transport:
                transport.close()


def launch_detached(args: list[str], cwd: Path | str | None = None) -> bool:
    """Start a GUI launcher without waiting for it. Returns False if it could not start."""
    try:
        subprocess.Popen(
            args,
            cwd=str(cwd) if cwd else None,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
        return True
    except OSError as e:
        _logging.info(f"Could not launch {args[0]}: {e}")
        return False


async def run_attached_async(command: str, cwd: Path | str | None = None) -> int:
    """Run a command with the terminal attached (no capture)."""
    try:
        process = await asyncio.create_subprocess_shell(
            command, cwd=str(cwd) if cwd else None
        )
        return await process.wait()
    except OSError as e:
        _logging.error(f"Command execution failed: {e} | Command: {command}")
        return 1
