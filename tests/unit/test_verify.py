"""Tests for SHA-256 artifact verification."""

import hashlib

import pytest

from unvenv.updater.errors import (
    ChecksumMismatchError,
    ChecksumUnavailableError,
    InvalidChecksumError,
)
from unvenv.updater.models import ChecksumRecord, ChecksumStatus, ReleaseArtifact
from unvenv.updater.verify import sha256_hex, verify_artifact

DATA = b"release archive payload"
DIGEST = hashlib.sha256(DATA).hexdigest()


@pytest.fixture
def artifact(linux_target) -> ReleaseArtifact:
    return ReleaseArtifact(data=DATA, url="https://example.test/a.tar.gz", platform=linux_target)


def _record(text: str) -> ChecksumRecord:
    return ChecksumRecord(text=text, url="https://example.test/a.tar.gz.sha256")


class TestVerifyArtifact:
    """Tests for verify_artifact()."""

    def test_sha256_hex(self):
        assert sha256_hex(DATA) == DIGEST

    def test_matching_digest(self, artifact):
        result = verify_artifact(artifact, _record(f"{DIGEST}  a.tar.gz\n"))
        assert result.status is ChecksumStatus.VERIFIED
        assert result.verified
        assert result.expected == result.actual == DIGEST

    def test_bare_digest_without_filename(self, artifact):
        assert verify_artifact(artifact, _record(DIGEST)).verified

    def test_uppercase_digest_accepted(self, artifact):
        assert verify_artifact(artifact, _record(DIGEST.upper() + "  a.tar.gz")).verified

    def test_mismatch_reports_both_digests(self, artifact):
        wrong = "0" * 64
        with pytest.raises(ChecksumMismatchError) as excinfo:
            verify_artifact(artifact, _record(f"{wrong}  a.tar.gz"))

        message = str(excinfo.value)
        assert wrong in message
        assert DIGEST in message
        assert excinfo.value.expected == wrong
        assert excinfo.value.actual == DIGEST

    def test_empty_checksum_file(self, artifact):
        with pytest.raises(InvalidChecksumError):
            verify_artifact(artifact, _record("   \n"))

    def test_missing_record_is_unavailable(self, artifact):
        result = verify_artifact(artifact, None)
        assert result.status is ChecksumStatus.UNAVAILABLE
        assert result.expected is None
        assert result.actual == DIGEST

    def test_missing_record_fatal_when_required(self, artifact):
        with pytest.raises(ChecksumUnavailableError, match="a.tar.gz"):
            verify_artifact(artifact, None, require_checksum=True)
