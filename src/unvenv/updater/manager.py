"""Update manager for the self-update command.

Sequences version resolution, download, checksum verification and binary
replacement, and maps every outcome onto an exit code:

- 0: updated, or the user declined the prompt
- 1: any failure
- 2: already running the target version (and not forced)

Every stage is synchronous and the first failure ends the run.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import TextIO

import httpx

from unvenv import __version__
from unvenv.config import Settings, get_settings
from unvenv.constants import CONFIRM_ANSWERS
from unvenv.logging import get_logger
from unvenv.updater.errors import ReleaseLookupError, UpdateError
from unvenv.updater.fetcher import artifact_filename, fetch_artifact, fetch_checksum
from unvenv.updater.installer import install_artifact, resolve_install_target
from unvenv.updater.lock import InstallLock
from unvenv.updater.models import (
    ChecksumStatus,
    DecisionKind,
    PlatformTarget,
    UpdateDecision,
    UpdateResult,
    UpdateStatus,
)
from unvenv.updater.platforms import detect_platform
from unvenv.updater.release import is_newer, resolve_version
from unvenv.updater.verify import verify_artifact

log = get_logger("unvenv.updater.manager")

CHECKSUM_UNAVAILABLE_WARNING = "Checksum file not available, skipping verification"


class UpdateManager:
    """Runs the self-update lifecycle for one invocation.

    Typical flow:
    1. ``check()`` or ``run()`` resolves the target version
    2. ``decide()`` compares it with the running version
    3. ``run()`` downloads, verifies and installs under an install lock
    """

    def __init__(
        self,
        settings: Settings | None = None,
        current_version: str = __version__,
        platform: PlatformTarget | None = None,
        transport: httpx.BaseTransport | None = None,
        prompt: Callable[[str], str] = input,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._current_version = current_version
        self._platform = platform or detect_platform()
        self._transport = transport
        self._prompt = prompt
        self._out = out
        self._err = err

    @property
    def current_version(self) -> str:
        return self._current_version

    @property
    def platform(self) -> PlatformTarget:
        return self._platform

    # ------------------------------------------------------------------
    # Decisions
    # ------------------------------------------------------------------

    def decide(self, target: str, force: bool = False) -> UpdateDecision:
        """Compare *target* with the running version (string equality)."""
        if target == self._current_version and not force:
            kind = DecisionKind.ALREADY_CURRENT
        else:
            kind = DecisionKind.UPDATE_AVAILABLE
        return UpdateDecision(
            kind=kind,
            current=self._current_version,
            target=target,
            forced=force,
        )

    def check(self, version: str | None = None) -> UpdateDecision:
        """Read-only check against the release index.

        Raises:
            ReleaseLookupError: the release index could not be read.
        """
        with self._client(self._settings.check_timeout) as client:
            target = resolve_version(version, client, self._settings)
        decision = self.decide(target)
        log.info(
            "updater_check_complete",
            current=self._current_version,
            latest=target,
            update_available=decision.update_available,
        )
        return decision

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def run(
        self,
        version: str | None = None,
        force: bool = False,
        install_dir: Path | str | None = None,
    ) -> UpdateResult:
        """Resolve, confirm, download, verify and install.

        Returns an ``UpdateResult``; ``result.exit_code`` is the process exit code.
        """
        result = UpdateResult(status=UpdateStatus.CHECKING, current_version=self._current_version)
        try:
            return self._do_run(result, version, force, install_dir)
        except UpdateError as exc:
            return self._fail(result, exc)
        except Exception as exc:
            log.exception("updater_unexpected_error")
            result.status = UpdateStatus.FAILED
            result.error = f"Unexpected error: {exc}"
            self._error(f"Update failed: {result.error}")
            return result
        finally:
            result.completed_at = datetime.now(UTC).isoformat()

    def _do_run(
        self,
        result: UpdateResult,
        version: str | None,
        force: bool,
        install_dir: Path | str | None,
    ) -> UpdateResult:
        settings = self._settings
        self._say("Checking for updates...")

        install_path = resolve_install_target(install_dir, self._platform, settings.binary_name)
        result.install_path = install_path

        with self._client(settings.update_check_timeout) as client:
            target = resolve_version(version, client, settings)
        result.target_version = target
        result.steps_completed.append("version_check")

        decision = self.decide(target, force)
        if not decision.update_available:
            result.status = UpdateStatus.UP_TO_DATE
            self._say(f"Already running latest version (v{self._current_version})")
            log.debug("updater_up_to_date", current=self._current_version)
            return result

        if is_newer(self._current_version, target):
            log.warning("updater_target_older", current=self._current_version, target=target)

        result.status = UpdateStatus.AVAILABLE
        self._say(f"Update available: v{target} (current: v{self._current_version})")
        self._say(f"Install location: {install_path}")
        self._say("")

        if not force and not self._confirm():
            result.status = UpdateStatus.CANCELLED
            self._say("Update cancelled.")
            log.info("updater_cancelled", target=target)
            return result

        with InstallLock(install_path), self._client(settings.download_timeout) as client:
            result.status = UpdateStatus.DOWNLOADING
            self._say(f"Downloading {artifact_filename(self._platform, settings)}...")
            artifact = fetch_artifact(client, target, self._platform, settings)
            record = fetch_checksum(client, artifact.url)
            result.steps_completed.append("download")

            result.status = UpdateStatus.VERIFYING
            if record is not None:
                self._say("Verifying checksum...")
            verification = verify_artifact(artifact, record, settings.require_checksum)
            result.checksum_status = verification.status
            if verification.status is ChecksumStatus.UNAVAILABLE:
                result.warnings.append(CHECKSUM_UNAVAILABLE_WARNING)
                self._error(f"Warning: {CHECKSUM_UNAVAILABLE_WARNING}")
            else:
                self._say("Checksum verified")
            result.steps_completed.append("verify")

            self._say("Installing...")
            install_artifact(
                artifact,
                install_path,
                settings.binary_name,
                on_stage=lambda stage: self._enter_stage(result, stage),
            )
            result.steps_completed.append("install")

        result.status = UpdateStatus.DONE
        self._say(f"Successfully updated to v{target}")
        self._say("")
        self._say(f"Run '{settings.binary_name} --version' to verify the installation.")
        log.info("updater_success", version=target, path=str(install_path))
        return result

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _client(self, timeout: float) -> httpx.Client:
        return httpx.Client(
            timeout=timeout,
            follow_redirects=True,
            headers={"User-Agent": self._settings.user_agent},
            transport=self._transport,
        )

    def _confirm(self) -> bool:
        try:
            response = self._prompt("Continue with update? [y/N]: ")
        except EOFError:
            return False
        return response.strip().lower() in CONFIRM_ANSWERS

    @staticmethod
    def _enter_stage(result: UpdateResult, stage: str) -> None:
        result.status = UpdateStatus(stage)
        if stage == "installing":
            result.steps_completed.append("extract")

    def _fail(self, result: UpdateResult, exc: UpdateError) -> UpdateResult:
        failed_during = result.status.value
        result.status = UpdateStatus.FAILED
        result.error = exc.message
        result.error_stage = exc.stage
        log.warning("updater_failed", stage=exc.stage, during=failed_during, error=exc.message)
        if isinstance(exc, ReleaseLookupError):
            self._error(exc.message)
        else:
            self._error(f"Update failed: {exc.message}")
        return result

    def _say(self, line: str) -> None:
        print(line, file=self._out or sys.stdout)

    def _error(self, line: str) -> None:
        print(line, file=self._err or sys.stderr)


def run_update(
    version: str | None = None,
    force: bool = False,
    install_dir: Path | str | None = None,
    **kwargs: object,
) -> int:
    """Run an update and return the process exit code.

    Extra keyword arguments are passed to ``UpdateManager``.
    """
    manager = UpdateManager(**kwargs)  # type: ignore[arg-type]
    return int(manager.run(version=version, force=force, install_dir=install_dir).exit_code)
