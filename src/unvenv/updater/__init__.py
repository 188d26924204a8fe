"""Self-update pipeline for the unvenv binary.

Resolves the target release, downloads the platform archive from GitHub,
verifies its SHA-256 checksum and atomically replaces the installed binary.
"""

from unvenv.updater.manager import UpdateManager, run_update
from unvenv.updater.models import ExitCode, UpdateDecision, UpdateResult, UpdateStatus

__all__ = [
    "ExitCode",
    "UpdateDecision",
    "UpdateManager",
    "UpdateResult",
    "UpdateStatus",
    "run_update",
]
