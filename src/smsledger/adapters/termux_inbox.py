"""On-device inbox adapter for Android via Termux:API.

``termux-sms-list`` is the only SMS reading capability available to Python on
a phone. It is missing on every other platform, which maps to
``Capability.UNAVAILABLE``. The Termux:API app raises the Android READ_SMS
dialog itself the first time the command runs.
"""

from __future__ import annotations

import asyncio
import json
import logging
import shutil
from typing import Any, Optional

from smsledger.adapters.sms_mapper import raw_message_from_record
from smsledger.core.models import Capability, RawMessage

LOGGER = logging.getLogger(__name__)

COMMAND = "termux-sms-list"
PERMISSION_TIMEOUT_SECONDS = 30.0


class TermuxSmsInbox:
    """Inbox adapter that shells out to ``termux-sms-list``."""

    def __init__(
        self,
        command: str = COMMAND,
        skip_malformed: bool = False,
        permission_timeout_seconds: float = PERMISSION_TIMEOUT_SECONDS,
    ) -> None:
        self._command = command
        self._skip_malformed = skip_malformed
        self._permission_timeout_seconds = permission_timeout_seconds

    def _executable(self) -> Optional[str]:
        return shutil.which(self._command)

    async def _run(self, *args: str) -> Any:
        executable = self._executable()
        if executable is None:
            raise RuntimeError(f"{self._command} is not installed")
        process = await asyncio.create_subprocess_exec(
            executable,
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await process.communicate()
        finally:
            # Cancelled by a caller timeout while the command still runs.
            if process.returncode is None:
                process.kill()
                await process.wait()
        if process.returncode != 0:
            message = stderr.decode("utf-8", errors="replace").strip()
            raise RuntimeError(f"{self._command} exited with {process.returncode}: {message}")
        text = stdout.decode("utf-8", errors="replace").strip()
        return json.loads(text) if text else None

    async def _check_access(self) -> bool:
        try:
            payload = await asyncio.wait_for(
                self._run("-l", "1", "-t", "inbox"),
                timeout=self._permission_timeout_seconds,
            )
        except asyncio.TimeoutError:
            # The READ_SMS dialog was left unanswered.
            LOGGER.warning("SMS permission check timed out after %ss", self._permission_timeout_seconds)
            return False
        except (RuntimeError, ValueError):
            LOGGER.debug("SMS permission check failed", exc_info=True)
            return False
        # Without READ_SMS the API answers with an error object or nothing.
        return isinstance(payload, list)

    async def capability(self) -> Capability:
        if self._executable() is None:
            return Capability.UNAVAILABLE
        if await self._check_access():
            return Capability.AVAILABLE
        return Capability.PERMISSION_PENDING

    async def request_permission(self) -> bool:
        return await self._check_access()

    async def list_inbox_messages(self, max_count: int) -> list[RawMessage]:
        payload = await self._run("-l", str(max_count), "-t", "inbox")
        if not isinstance(payload, list):
            raise RuntimeError(f"Unexpected {self._command} output: {payload!r}")

        messages: list[RawMessage] = []
        for record in payload:
            try:
                messages.append(raw_message_from_record(record))
            except (ValueError, AttributeError):
                if not self._skip_malformed:
                    raise
                LOGGER.warning("Skipping malformed SMS record")
        return messages
