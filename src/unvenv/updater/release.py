"""Release version resolution.

Either the caller names a version, or the latest release is read from the
GitHub release index. Versions are plain strings; the up-to-date decision is
string equality, and the semver helpers here only feed diagnostics.
"""

from __future__ import annotations

import re

import httpx

from unvenv.config import Settings
from unvenv.logging import get_logger
from unvenv.updater.errors import ReleaseLookupError

log = get_logger("unvenv.updater.release")

# MAJOR.MINOR.PATCH with optional "v" and "-PRE"
_SEMVER_RE = re.compile(
    r"^v?(?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+)(?:-(?P<pre>[0-9A-Za-z.]+))?$"
)


def normalize_version(tag: str, tag_prefix: str = "unvenv-v") -> str:
    """Strip the tool tag prefix, then any leading ``v``.

    Idempotent: an already-normalized version comes back unchanged.
    """
    version = tag.strip()
    if tag_prefix:
        while version.startswith(tag_prefix):
            version = version[len(tag_prefix) :]
    return version.lstrip("v")


def parse_semver(version_str: str) -> tuple[int, int, int, str] | None:
    """Split ``MAJOR.MINOR.PATCH[-PRE]`` into its parts, or None if it is not one.

    Only used to tell whether a requested release is older than the running
    one; the up-to-date decision itself compares strings.
    """
    match = _SEMVER_RE.match(version_str.strip())
    if match is None:
        return None
    major, minor, patch = (int(match.group(part)) for part in ("major", "minor", "patch"))
    return major, minor, patch, match.group("pre") or ""


def _sort_key(parts: tuple[int, int, int, str]) -> tuple[int, int, int, bool]:
    major, minor, patch, pre = parts
    # a release outranks any of its pre-releases
    return major, minor, patch, not pre


def is_newer(candidate: str, current: str) -> bool:
    """True when both parse and *candidate* orders after *current*."""
    cand_parts = parse_semver(candidate)
    cur_parts = parse_semver(current)
    if cand_parts is None or cur_parts is None:
        return False
    return _sort_key(cand_parts) > _sort_key(cur_parts)


def fetch_latest_version(client: httpx.Client, settings: Settings) -> str:
    """Query the release index and return the normalized latest version."""
    headers: dict[str, str] = {"Accept": "application/vnd.github+json"}
    if settings.github_token is not None:
        headers["Authorization"] = f"Bearer {settings.github_token.get_secret_value()}"

    url = settings.latest_release_url
    try:
        resp = client.get(url, headers=headers)
    except httpx.HTTPError as exc:
        log.warning("updater_check_failed", url=url, error=str(exc))
        raise ReleaseLookupError(f"Failed to check for updates: {exc}") from exc

    if not resp.is_success:
        log.warning("updater_release_index_error", url=url, status=resp.status_code)
        raise ReleaseLookupError(
            f"Failed to check for updates: release index returned HTTP {resp.status_code}"
        )

    try:
        data = resp.json()
    except ValueError as exc:
        raise ReleaseLookupError(f"Failed to check for updates: malformed JSON: {exc}") from exc

    tag = data.get("tag_name") if isinstance(data, dict) else None
    if not isinstance(tag, str) or not tag.strip():
        raise ReleaseLookupError("Failed to check for updates: No tag_name in response")

    version = normalize_version(tag, settings.tag_prefix)
    log.debug("updater_latest_release", tag=tag, version=version)
    return version


def resolve_version(explicit: str | None, client: httpx.Client, settings: Settings) -> str:
    """Return *explicit* verbatim, or the latest published version."""
    if explicit is not None:
        return explicit
    return fetch_latest_version(client, settings)
