"""SHA-256 verification of downloaded artifacts.

A published digest that does not match is always fatal. A digest that was
never published is reported as ``ChecksumStatus.UNAVAILABLE`` and left to the
caller, unless ``require_checksum`` turns it into an error.
"""

from __future__ import annotations

import hashlib

from unvenv.logging import get_logger
from unvenv.updater.errors import (
    ChecksumMismatchError,
    ChecksumUnavailableError,
    InvalidChecksumError,
)
from unvenv.updater.models import (
    ChecksumRecord,
    ChecksumStatus,
    ReleaseArtifact,
    VerificationResult,
)

log = get_logger("unvenv.updater.verify")


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def verify_artifact(
    artifact: ReleaseArtifact,
    record: ChecksumRecord | None,
    require_checksum: bool = False,
) -> VerificationResult:
    """Check *artifact* against *record*.

    Raises:
        ChecksumMismatchError: digests differ.
        InvalidChecksumError: the record holds no digest.
        ChecksumUnavailableError: no record and ``require_checksum`` is set.
    """
    actual = sha256_hex(artifact.data)

    if record is None:
        if require_checksum:
            raise ChecksumUnavailableError(
                f"Checksum file not available for {artifact.filename} and verification is required"
            )
        log.warning("updater_checksum_skipped", url=artifact.url)
        return VerificationResult(status=ChecksumStatus.UNAVAILABLE, actual=actual)

    expected = record.expected_digest
    if expected is None:
        raise InvalidChecksumError(f"Invalid checksum format in {record.url}")

    if actual != expected:
        log.warning("updater_checksum_mismatch", expected=expected, actual=actual)
        raise ChecksumMismatchError(expected=expected, actual=actual)

    log.info("updater_checksum_verified", digest=actual)
    return VerificationResult(status=ChecksumStatus.VERIFIED, actual=actual, expected=expected)
