"""Access logger — append-only JSON Lines request log with rotation.

Records request metadata only. Request and response bodies are never written.
"""

from __future__ import annotations

import fcntl
import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from edgechat.models import AccessEvent


class AccessLogger:
    """Append-only structured access logger with size-based rotation.

    When the live file reaches ``max_bytes`` it becomes ``<name>.1``, older
    backups shift up by one, and anything past ``backup_count`` is dropped.
    With ``backup_count=0`` the full file is discarded instead.
    """

    def __init__(
        self,
        log_path: str,
        max_bytes: int = 10_485_760,
        backup_count: int = 5,
    ) -> None:
        self.log_path = Path(log_path)
        self._max_bytes = max_bytes
        self._backup_count = backup_count

    @classmethod
    def from_env(cls, log_path: str) -> AccessLogger:
        """Create AccessLogger with rotation settings from environment variables."""
        max_bytes = int(os.environ.get("ACCESS_LOG_MAX_BYTES", "10485760"))
        backup_count = int(os.environ.get("ACCESS_LOG_BACKUP_COUNT", "5"))
        return cls(log_path=log_path, max_bytes=max_bytes, backup_count=backup_count)

    def _backup(self, index: int) -> Path:
        return self.log_path.with_name(f"{self.log_path.name}.{index}")

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        # Shared across processes writing the same log
        lock_path = self.log_path.with_name(f".{self.log_path.name}.lock")
        with open(lock_path, "w") as lock:
            fcntl.flock(lock, fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(lock, fcntl.LOCK_UN)

    def _needs_rotation(self) -> bool:
        try:
            return self.log_path.stat().st_size >= self._max_bytes
        except FileNotFoundError:
            return False

    def _rotate(self) -> None:
        if self._backup_count < 1:
            self.log_path.unlink()
            return
        self._backup(self._backup_count).unlink(missing_ok=True)
        for index in reversed(range(1, self._backup_count)):
            source = self._backup(index)
            if source.exists():
                source.replace(self._backup(index + 1))
        self.log_path.replace(self._backup(1))

    def log(self, event: AccessEvent) -> None:
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        line = event.model_dump_json()
        with self._exclusive():
            if self._needs_rotation():
                self._rotate()
            with open(self.log_path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
