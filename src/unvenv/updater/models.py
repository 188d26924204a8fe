"""Data types shared by the update pipeline."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum, IntEnum
from pathlib import Path
from typing import Any

from unvenv.constants import EXIT_FAILURE, EXIT_SUCCESS, EXIT_UP_TO_DATE, UNKNOWN_TARGET


class ExitCode(IntEnum):
    """Process exit codes of the update command."""

    SUCCESS = EXIT_SUCCESS
    FAILURE = EXIT_FAILURE
    UP_TO_DATE = EXIT_UP_TO_DATE


class UpdateStatus(Enum):
    """State of an update run."""

    IDLE = "idle"
    CHECKING = "checking"
    UP_TO_DATE = "up_to_date"
    AVAILABLE = "available"
    CANCELLED = "cancelled"
    DOWNLOADING = "downloading"
    VERIFYING = "verifying"
    EXTRACTING = "extracting"
    INSTALLING = "installing"
    DONE = "done"
    FAILED = "failed"


class DecisionKind(Enum):
    ALREADY_CURRENT = "already_current"
    UPDATE_AVAILABLE = "update_available"


class ChecksumStatus(Enum):
    """Outcome of integrity verification."""

    VERIFIED = "verified"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class PlatformTarget:
    """Operating system and CPU architecture of the running binary."""

    os_name: str
    arch: str
    triple: str

    @property
    def is_known(self) -> bool:
        return self.triple != UNKNOWN_TARGET

    @property
    def is_windows(self) -> bool:
        return self.os_name == "windows"

    @property
    def archive_ext(self) -> str:
        return "zip" if self.is_windows else "tar.gz"

    def binary_filename(self, name: str) -> str:
        return f"{name}.exe" if self.is_windows else name


@dataclass
class ReleaseArtifact:
    """Downloaded release archive."""

    data: bytes
    url: str
    platform: PlatformTarget

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def filename(self) -> str:
        return self.url.rsplit("/", 1)[-1]

    def sha256(self) -> str:
        return hashlib.sha256(self.data).hexdigest()


@dataclass(frozen=True)
class ChecksumRecord:
    """Contents of a ``.sha256`` companion file (``<hex-digest>  <filename>``)."""

    text: str
    url: str

    @property
    def expected_digest(self) -> str | None:
        tokens = self.text.split()
        return tokens[0].lower() if tokens else None


@dataclass(frozen=True)
class VerificationResult:
    """Result of checking an artifact against its published digest."""

    status: ChecksumStatus
    actual: str
    expected: str | None = None

    @property
    def verified(self) -> bool:
        return self.status is ChecksumStatus.VERIFIED


@dataclass(frozen=True)
class UpdateDecision:
    """Whether the resolved target warrants an install."""

    kind: DecisionKind
    current: str
    target: str
    forced: bool = False

    @property
    def update_available(self) -> bool:
        return self.kind is DecisionKind.UPDATE_AVAILABLE


@dataclass
class UpdateResult:
    """Result of an update run."""

    status: UpdateStatus
    current_version: str
    target_version: str | None = None
    install_path: Path | None = None
    checksum_status: ChecksumStatus | None = None
    warnings: list[str] = field(default_factory=list)
    error: str | None = None
    error_stage: str | None = None
    steps_completed: list[str] = field(default_factory=list)
    started_at: str = field(default_factory=lambda: datetime.now(UTC).isoformat())
    completed_at: str | None = None

    @property
    def exit_code(self) -> ExitCode:
        if self.status is UpdateStatus.UP_TO_DATE:
            return ExitCode.UP_TO_DATE
        if self.status in (UpdateStatus.DONE, UpdateStatus.CANCELLED):
            return ExitCode.SUCCESS
        return ExitCode.FAILURE

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "current_version": self.current_version,
            "target_version": self.target_version,
            "install_path": str(self.install_path) if self.install_path else None,
            "checksum_status": self.checksum_status.value if self.checksum_status else None,
            "warnings": list(self.warnings),
            "error": self.error,
            "error_stage": self.error_stage,
            "steps_completed": self.steps_completed,
            "started_at": self.started_at,
            "completed_at": self.completed_at,
            "exit_code": int(self.exit_code),
        }
