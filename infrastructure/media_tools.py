"""Run ffmpeg and ffprobe as child processes.

Commands run through :func:`asyncio.create_subprocess_exec`. Arguments are
never passed through a shell. A command that exceeds its timeout, or whose
awaiting task is cancelled, has its process killed before control returns.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Sequence

from config import avtool as avtool_config
from core.exceptions import MediaToolError

logger = logging.getLogger(__name__)

_STDERR_TAIL = 4000


@dataclass(frozen=True, slots=True)
class ToolResult:
    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str
    duration: float


class MediaToolRunner:
    def __init__(
        self,
        *,
        ffmpeg_binary: str = avtool_config.FFMPEG_BINARY,
        ffprobe_binary: str = avtool_config.FFPROBE_BINARY,
        timeout_seconds: float | None = avtool_config.MEDIA_TOOL_TIMEOUT_SECONDS,
    ) -> None:
        self.ffmpeg_binary = ffmpeg_binary
        self.ffprobe_binary = ffprobe_binary
        self.timeout_seconds = timeout_seconds

    async def run(self, program: str, args: Sequence[str], *, timeout: float | None = None) -> ToolResult:
        """Execute ``program`` with ``args`` and capture its output.

        Raises :class:`MediaToolError` when the binary is missing or the
        command times out. A non-zero exit status is returned, not raised.
        """

        command = (program, *(str(arg) for arg in args))
        limit = timeout if timeout is not None else self.timeout_seconds
        logger.debug("Executing %s", " ".join(command))
        start = time.monotonic()

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as exc:
            raise MediaToolError(f"{program} executable not found", tool=program) from exc
        except OSError as exc:
            raise MediaToolError(f"Failed to start {program}: {exc}", tool=program) from exc

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=limit)
        except asyncio.TimeoutError as exc:
            await self._kill(process)
            raise MediaToolError(f"{program} timed out after {limit}s", tool=program) from exc
        except asyncio.CancelledError:
            await self._kill(process)
            raise

        result = ToolResult(
            command=command,
            returncode=process.returncode if process.returncode is not None else -1,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
            duration=time.monotonic() - start,
        )
        logger.debug("%s exited with %s in %.3fs", program, result.returncode, result.duration)
        return result

    @staticmethod
    async def _kill(process: asyncio.subprocess.Process) -> None:
        if process.returncode is not None:
            return
        try:
            process.kill()
        except ProcessLookupError:
            return
        await process.wait()
        logger.warning("Killed media tool process %s", process.pid)

    async def run_ffmpeg(self, args: Sequence[str]) -> ToolResult:
        """Run ffmpeg, overwriting outputs; non-zero exit raises with stderr."""

        result = await self.run(self.ffmpeg_binary, ["-hide_banner", "-y", *args])
        if result.returncode != 0:
            stderr = result.stderr[-_STDERR_TAIL:]
            logger.warning("ffmpeg failed with status %s: %s", result.returncode, stderr.strip()[-500:])
            raise MediaToolError(
                f"ffmpeg failed with exit code {result.returncode}",
                tool="ffmpeg",
                returncode=result.returncode,
                stderr=stderr,
            )
        return result

    async def run_ffprobe(self, path: str) -> Dict[str, Any]:
        """Return ffprobe's JSON description of the streams and container of ``path``."""

        result = await self.run(
            self.ffprobe_binary,
            ["-v", "error", "-print_format", "json", "-show_format", "-show_streams", str(path)],
        )
        if result.returncode != 0:
            raise MediaToolError(
                f"ffprobe failed with exit code {result.returncode}",
                tool="ffprobe",
                returncode=result.returncode,
                stderr=result.stderr[-_STDERR_TAIL:],
            )
        try:
            payload = json.loads(result.stdout or "{}")
        except json.JSONDecodeError as exc:
            raise MediaToolError("ffprobe returned invalid JSON", tool="ffprobe", stderr=result.stderr) from exc
        if not isinstance(payload, dict):
            raise MediaToolError("ffprobe returned an unexpected payload", tool="ffprobe")
        return payload


__all__ = ["MediaToolRunner", "ToolResult"]
