"""unvenv: Python virtual environment detector CLI.

This package carries the self-update core: resolve a release, download the
platform archive, verify its checksum and replace the installed binary.
"""

__version__ = "0.1.0"
