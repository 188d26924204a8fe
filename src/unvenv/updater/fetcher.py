"""Release artifact download."""

from __future__ import annotations

import httpx

from unvenv.config import Settings
from unvenv.constants import CHECKSUM_SUFFIX
from unvenv.logging import get_logger
from unvenv.updater.errors import DownloadError
from unvenv.updater.models import ChecksumRecord, PlatformTarget, ReleaseArtifact

log = get_logger("unvenv.updater.fetcher")


def artifact_filename(platform: PlatformTarget, settings: Settings) -> str:
    return f"{settings.binary_name}-{platform.triple}.{platform.archive_ext}"


def artifact_url(version: str, platform: PlatformTarget, settings: Settings) -> str:
    """Build the download URL for *version* on *platform*."""
    tag = f"{settings.tag_prefix}{version}"
    return f"{settings.release_download_base}/{tag}/{artifact_filename(platform, settings)}"


def checksum_url(url: str) -> str:
    return f"{url}{CHECKSUM_SUFFIX}"


def fetch_artifact(
    client: httpx.Client,
    version: str,
    platform: PlatformTarget,
    settings: Settings,
) -> ReleaseArtifact:
    """Download the release archive.

    Raises:
        DownloadError: on transport failure or any non-success status.
    """
    url = artifact_url(version, platform, settings)
    log.info("updater_download_started", url=url, target=platform.triple)

    try:
        resp = client.get(url)
    except httpx.HTTPError as exc:
        log.warning("updater_download_failed", url=url, error=str(exc))
        raise DownloadError(f"Download failed: {exc}") from exc

    if not resp.is_success:
        log.warning("updater_download_failed", url=url, status=resp.status_code)
        raise DownloadError(
            f"Download failed: HTTP {resp.status_code} {resp.reason_phrase}".rstrip(),
            status_code=resp.status_code,
        )

    artifact = ReleaseArtifact(data=resp.content, url=url, platform=platform)
    log.info("updater_download_complete", url=url, size=artifact.size)
    return artifact


def fetch_checksum(client: httpx.Client, url: str) -> ChecksumRecord | None:
    """Download the ``.sha256`` companion of *url*.

    Returns None when the companion is not published (any non-success
    status). Transport errors still raise.
    """
    sum_url = checksum_url(url)
    try:
        resp = client.get(sum_url)
    except httpx.HTTPError as exc:
        raise DownloadError(f"Checksum download failed: {exc}") from exc

    if not resp.is_success:
        log.warning("updater_checksum_unavailable", url=sum_url, status=resp.status_code)
        return None

    return ChecksumRecord(text=resp.text, url=sum_url)
