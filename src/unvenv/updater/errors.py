"""Exceptions raised by the update pipeline.

Every error names the stage that produced it so a single line of output is
enough to tell where an update stopped. Nothing here is retried.
"""

from __future__ import annotations


class UpdateError(Exception):
    """Base exception for update failures."""

    stage = "update"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ReleaseLookupError(UpdateError):
    """Release index could not be queried or returned unusable metadata."""

    stage = "version_check"


class DownloadError(UpdateError):
    """Archive download failed."""

    stage = "download"

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ChecksumMismatchError(UpdateError):
    """Downloaded bytes do not match the published SHA-256 digest."""

    stage = "verify"

    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(
            f"Checksum verification failed!\nExpected: {expected}\nActual:   {actual}"
        )
        self.expected = expected
        self.actual = actual


class ChecksumUnavailableError(UpdateError):
    """No checksum companion was published and one is required."""

    stage = "verify"


class InvalidChecksumError(UpdateError):
    """Checksum companion did not contain a digest."""

    stage = "verify"


class UnsupportedArchiveError(UpdateError):
    """Archive format cannot be extracted by this build."""

    stage = "extract"


class ArchiveExtractionError(UpdateError):
    """Archive is corrupt or contains unsafe members."""

    stage = "extract"


class BinaryNotFoundError(UpdateError):
    """Archive unpacked but the expected binary was not in it."""

    stage = "extract"

    def __init__(self, filename: str) -> None:
        super().__init__(f"Binary not found in archive: {filename}")
        self.filename = filename


class InstallError(UpdateError):
    """Filesystem failure while replacing the installed binary."""

    stage = "install"


class UpdateLockedError(InstallError):
    """Another update already holds the install lock."""
