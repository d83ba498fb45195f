"""
Discovery and termination of running Antigravity processes
"""

import asyncio
import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Iterable, Sequence

import psutil

from .errors import ProcessEnumerationError, TerminationError, UnsupportedPlatformError
from .path_store import is_regular_file
from .platforms import PlatformSupport

logger = logging.getLogger(__name__)

CommandRunner = Callable[[Sequence[str]], Awaitable[tuple[int, str]]]


@dataclass(frozen=True)
class ProcessMatch:
    """A live process whose name matched and whose executable validated"""

    pid: int
    name: str
    executable_path: Path | None


async def run_command(argv: Sequence[str]) -> tuple[int, str]:
    """Run argv to completion and return (exit status, decoded stderr)"""
    kwargs = {}
    if os.name == "nt":
        kwargs["creationflags"] = subprocess.CREATE_NO_WINDOW
    proc = await asyncio.create_subprocess_exec(
        *argv,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        **kwargs,
    )
    _, stderr = await proc.communicate()
    return proc.returncode, stderr.decode(errors="replace").strip()


class ProcessController:
    """Finds and kills Antigravity processes using the OS strategy"""

    def __init__(
        self,
        platform: PlatformSupport,
        process_iter: Callable[..., Iterable] | None = None,
        runner: CommandRunner | None = None,
        validator: Callable[[str], bool] = is_regular_file,
    ):
        self.platform = platform
        self._process_iter = process_iter or psutil.process_iter
        self._runner = runner or run_command
        self._validate = validator

    def _snapshot(self) -> list[tuple[int, str, str | None]]:
        try:
            table = []
            for proc in self._process_iter(["pid", "name", "exe"]):
                info = proc.info
                table.append((info.get("pid"), info.get("name") or "", info.get("exe")))
            return table
        except (psutil.Error, OSError) as e:
            raise ProcessEnumerationError(f"Failed to enumerate processes: {e}") from e

    def find_running_by_names(self, patterns: Sequence[str]) -> list[ProcessMatch]:
        """Processes named exactly like one of patterns, in pattern order

        The process table is read once per call. Matches without an
        executable path that passes validation are dropped.
        """
        table = self._snapshot()
        matches = []
        for pattern in patterns:
            for pid, name, exe in table:
                if name != pattern or not exe:
                    continue
                if not self._validate(exe):
                    logger.debug("Skipping %s (pid %s): %s is not a file", name, pid, exe)
                    continue
                matches.append(ProcessMatch(pid=pid, name=name, executable_path=Path(exe)))
        return matches

    def find_running(self) -> list[ProcessMatch]:
        return self.find_running_by_names(self.platform.process_names)

    def is_running(self) -> bool:
        return bool(self.find_running())

    async def terminate_by_names(self, patterns: Sequence[str] | None = None) -> str:
        """Force-kill by each pattern in turn; return the first success message

        Raises TerminationError carrying the last attempt's message when every
        pattern fails, and UnsupportedPlatformError without trying anything
        when the OS has no kill backend.
        """
        if patterns is None:
            patterns = self.platform.kill_patterns
        if self.platform.kill_tool is None:
            raise UnsupportedPlatformError(self.platform.os_kind.value)
        if not patterns:
            raise TerminationError("No process patterns to terminate")

        last_error = ""
        last_pattern = None
        for pattern in patterns:
            argv = self.platform.kill_command(pattern)
            try:
                returncode, stderr = await self._runner(argv)
            except OSError as e:
                raise TerminationError(f"Failed to run {argv[0]}: {e}", pattern) from e

            if returncode == 0:
                message = self.platform.describe_kill_success(pattern)
                logger.info(message)
                return message

            last_error = self.platform.describe_kill_failure(pattern, stderr)
            last_pattern = pattern
            logger.debug(last_error)

        raise TerminationError(last_error, last_pattern)
