"""Test helpers: tarball builders and a fake GitHub release server."""

from __future__ import annotations

import hashlib
import io
import tarfile
from typing import Any

import httpx

from unvenv.config import Settings
from unvenv.updater.fetcher import artifact_url, checksum_url
from unvenv.updater.models import PlatformTarget

LINUX_X64 = PlatformTarget(os_name="linux", arch="x86_64", triple="x86_64-unknown-linux-gnu")
WINDOWS_X64 = PlatformTarget(os_name="windows", arch="x86_64", triple="x86_64-pc-windows-msvc")


def build_tarball(members: dict[str, bytes], mode: int = 0o644) -> bytes:
    """Return a gzipped tar holding *members* (name -> content)."""
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for name, content in members.items():
            info = tarfile.TarInfo(name)
            info.size = len(content)
            info.mode = mode
            tar.addfile(info, io.BytesIO(content))
    return buf.getvalue()


def sha256_line(data: bytes, filename: str = "archive.tar.gz") -> str:
    return f"{hashlib.sha256(data).hexdigest()}  {filename}\n"


class FakeReleaseServer:
    """Release index, archive and checksum served through ``httpx.MockTransport``.

    ``checksum=None`` makes the ``.sha256`` companion 404.
    """

    def __init__(
        self,
        settings: Settings,
        platform: PlatformTarget,
        version: str = "2.0.0",
        archive: bytes = b"",
        checksum: str | None = None,
    ) -> None:
        self.settings = settings
        self.version = version
        self.archive = archive
        self.archive_status = 200
        self.checksum = checksum
        self.index_status = 200
        self.index_body: Any = {"tag_name": f"{settings.tag_prefix}{version}"}
        self.artifact_url = artifact_url(version, platform, settings)
        self.requests: list[httpx.Request] = []

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def requested_urls(self) -> list[str]:
        return [str(r.url) for r in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        if url == self.settings.latest_release_url:
            if isinstance(self.index_body, bytes):
                return httpx.Response(self.index_status, content=self.index_body)
            return httpx.Response(self.index_status, json=self.index_body)
        if url == self.artifact_url:
            return httpx.Response(self.archive_status, content=self.archive)
        if url == checksum_url(self.artifact_url) and self.checksum is not None:
            return httpx.Response(200, text=self.checksum)
        return httpx.Response(404, text="Not Found")
