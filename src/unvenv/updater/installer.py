"""Archive extraction and binary replacement."""

from __future__ import annotations

import io
import os
import shutil
import sys
import tarfile
import tempfile
from collections.abc import Callable
from pathlib import Path

from unvenv.constants import EXECUTABLE_MODE
from unvenv.logging import get_logger
from unvenv.updater.errors import (
    ArchiveExtractionError,
    BinaryNotFoundError,
    InstallError,
    UnsupportedArchiveError,
)
from unvenv.updater.models import PlatformTarget, ReleaseArtifact

log = get_logger("unvenv.updater.installer")


_SCRIPT_SUFFIXES = {".py", ".pyc", ".pyz"}


def current_executable(binary_filename: str = "unvenv") -> Path:
    """Path of the running ``unvenv`` binary.

    Under ``python -m unvenv`` ``argv[0]`` is the package's ``__main__.py``,
    which must never be replaced; the installed binary is looked up on
    ``PATH`` instead.
    """
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve()
    argv0 = sys.argv[0] if sys.argv and sys.argv[0] else ""
    if not argv0:
        raise InstallError("Failed to determine binary location")
    if Path(argv0).suffix.lower() in _SCRIPT_SUFFIXES:
        found = shutil.which(binary_filename)
        if found and Path(found).suffix.lower() not in _SCRIPT_SUFFIXES:
            return Path(found).resolve()
        raise InstallError("Failed to determine binary location; use --install-dir")
    if os.sep not in argv0 and (os.altsep is None or os.altsep not in argv0):
        found = shutil.which(argv0)
        if found:
            return Path(found).resolve()
    return Path(argv0).resolve()


def resolve_install_target(
    install_dir: Path | str | None,
    platform: PlatformTarget,
    binary_name: str,
) -> Path:
    """Install destination: ``install_dir/<binary>`` or the running executable."""
    if install_dir is not None:
        return Path(install_dir) / platform.binary_filename(binary_name)
    return current_executable(platform.binary_filename(binary_name))


def extract_archive(artifact: ReleaseArtifact, dest: Path) -> None:
    """Unpack *artifact* into *dest*.

    Only ``.tar.gz`` is handled; members that would land outside *dest*
    (absolute paths, ``..``, escaping links) are rejected.
    """
    if artifact.platform.archive_ext == "zip":
        raise UnsupportedArchiveError(
            "Zip archives are not supported on this platform yet "
            f"({artifact.platform.triple}); download {artifact.url} manually"
        )

    try:
        with tarfile.open(fileobj=io.BytesIO(artifact.data), mode="r|gz") as tar:
            tar.extractall(dest, filter="data")
    except (tarfile.TarError, EOFError, OSError) as exc:
        raise ArchiveExtractionError(f"Failed to extract {artifact.filename}: {exc}") from exc


def locate_binary(scratch: Path, filename: str) -> Path:
    candidate = scratch / filename
    if not candidate.is_file():
        raise BinaryNotFoundError(filename)
    return candidate


def make_executable(path: Path, platform: PlatformTarget) -> None:
    """Set rwxr-xr-x on Unix targets; Windows has no mode bits to set."""
    if platform.is_windows:
        return
    os.chmod(path, EXECUTABLE_MODE)


def _install_error(exc: OSError) -> InstallError:
    if isinstance(exc, PermissionError):
        return InstallError(
            "Permission denied. Try running with sudo or use --install-dir to specify a "
            f"writable location:\n  {exc}"
        )
    return InstallError(str(exc))


def replace_binary(source: Path, target: Path) -> None:
    """Atomically replace *target* with a copy of *source*.

    The copy is written to a temporary sibling of *target* and renamed over
    it, so other processes see either the old or the new binary.
    """
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
        )
    except OSError as exc:
        raise _install_error(exc) from exc

    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as dst, source.open("rb") as src:
            shutil.copyfileobj(src, dst)
            dst.flush()
            os.fsync(dst.fileno())
        shutil.copymode(source, tmp_path)
        os.replace(tmp_path, target)
    except OSError as exc:
        tmp_path.unlink(missing_ok=True)
        raise _install_error(exc) from exc


def install_artifact(
    artifact: ReleaseArtifact,
    target: Path,
    binary_name: str,
    on_stage: Callable[[str], None] | None = None,
) -> Path:
    """Extract *artifact* into a scratch directory and install its binary at *target*.

    *on_stage* is called with ``"extracting"`` and ``"installing"`` as the
    work moves on. The scratch directory is removed on every exit path.
    """
    platform = artifact.platform
    filename = platform.binary_filename(binary_name)
    notify = on_stage or (lambda _stage: None)

    with tempfile.TemporaryDirectory(prefix="unvenv-update-") as scratch_dir:
        scratch = Path(scratch_dir)
        notify("extracting")
        extract_archive(artifact, scratch)
        binary = locate_binary(scratch, filename)
        make_executable(binary, platform)
        notify("installing")
        replace_binary(binary, target)

    log.info("updater_binary_installed", path=str(target))
    return target
