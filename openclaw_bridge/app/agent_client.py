"""openclaw CLI를 하위 프로세스로 실행하는 어댑터예요.

표준 출력/표준 오류는 조금씩 읽어서 상한을 넘으면 프로세스를 죽이고 실패로 처리해요.
호출한 태스크가 취소되면 (예: HTTP 클라이언트가 끊기면) 프로세스도 함께 종료해요.
"""

from __future__ import annotations

import asyncio
import contextlib
from dataclasses import dataclass

from libs.common.errors import AgentCommandError
from libs.common.logging import get_logger

logger = get_logger("openclaw_bridge.agent_client")

_READ_CHUNK_BYTES = 65_536


class _OutputLimitExceeded(Exception):
    def __init__(self, stream_name: str) -> None:
        super().__init__(stream_name)
        self.stream_name = stream_name


@dataclass(slots=True)
class AgentRunResult:
    exit_code: int
    stdout: str
    stderr: str


def escape_message(message: str) -> str:
    return message.replace('"', '\\"')


class OpenClawAgent:
    def __init__(
        self,
        *,
        command: str = "openclaw",
        session_label: str = "main",
        max_output_bytes: int = 1_000_000,
        timeout_grace_seconds: float = 15.0,
    ) -> None:
        self._command = command
        self._session_label = session_label
        self._max_output_bytes = max_output_bytes
        self._timeout_grace_seconds = timeout_grace_seconds

    async def send_message(self, message: str, *, timeout_seconds: int = 120) -> str:
        """세션 라벨로 메시지를 보내고 에이전트의 응답 텍스트를 반환해요."""
        args = [
            "sessions",
            "send",
            "--label",
            self._session_label,
            "--message",
            escape_message(message),
            "--timeout",
            str(timeout_seconds),
        ]
        return await self._run_checked(args, deadline_seconds=timeout_seconds + self._timeout_grace_seconds)

    async def list_sessions(self, *, limit: int = 10) -> str:
        args = ["sessions", "list", "--limit", str(limit)]
        return await self._run_checked(args, deadline_seconds=self._timeout_grace_seconds or None)

    async def _run_checked(self, args: list[str], *, deadline_seconds: float | None) -> str:
        result = await self.run(args, deadline_seconds=deadline_seconds)
        if result.exit_code != 0:
            raise AgentCommandError(f"OpenClaw exited with code {result.exit_code}: {result.stderr}")
        return result.stdout.strip()

    async def run(self, args: list[str], *, deadline_seconds: float | None = None) -> AgentRunResult:
        try:
            process = await asyncio.create_subprocess_exec(
                self._command,
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise AgentCommandError(f"Failed to spawn {self._command}: {exc}") from exc

        logger.info("agent_process_started", command=self._command, action=" ".join(args[:2]), pid=process.pid)
        try:
            stdout_bytes, stderr_bytes = await asyncio.wait_for(
                self._collect(process),
                timeout=deadline_seconds,
            )
        except asyncio.TimeoutError as exc:
            await _kill(process)
            raise AgentCommandError(
                f"OpenClaw did not finish within {deadline_seconds:g} seconds",
                retryable=True,
            ) from exc
        except _OutputLimitExceeded as exc:
            await _kill(process)
            raise AgentCommandError(
                f"OpenClaw {exc.stream_name} exceeded {self._max_output_bytes} bytes"
            ) from exc
        except asyncio.CancelledError:
            await _kill(process)
            logger.warning("agent_process_cancelled", command=self._command, pid=process.pid)
            raise

        exit_code = process.returncode if process.returncode is not None else -1
        logger.info(
            "agent_process_finished",
            command=self._command,
            pid=process.pid,
            exit_code=exit_code,
            stdout_bytes=len(stdout_bytes),
            stderr_bytes=len(stderr_bytes),
        )
        return AgentRunResult(
            exit_code=exit_code,
            stdout=stdout_bytes.decode("utf-8", errors="replace"),
            stderr=stderr_bytes.decode("utf-8", errors="replace"),
        )

    async def _collect(self, process: asyncio.subprocess.Process) -> tuple[bytes, bytes]:
        assert process.stdout is not None
        assert process.stderr is not None
        stdout_bytes, stderr_bytes = await asyncio.gather(
            self._read_bounded(process.stdout, "stdout"),
            self._read_bounded(process.stderr, "stderr"),
        )
        await process.wait()
        return stdout_bytes, stderr_bytes

    async def _read_bounded(self, stream: asyncio.StreamReader, stream_name: str) -> bytes:
        buffer = bytearray()
        while True:
            chunk = await stream.read(_READ_CHUNK_BYTES)
            if not chunk:
                return bytes(buffer)
            buffer.extend(chunk)
            if len(buffer) > self._max_output_bytes:
                raise _OutputLimitExceeded(stream_name)


async def _kill(process: asyncio.subprocess.Process) -> None:
    if process.returncode is not None:
        return
    with contextlib.suppress(ProcessLookupError):
        process.kill()
    await process.wait()
