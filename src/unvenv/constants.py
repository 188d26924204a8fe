"""Centralized constants for unvenv."""

# Exit codes returned by the update command
EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_UP_TO_DATE = 2

# Mode applied to an extracted binary before it is installed (rwxr-xr-x)
EXECUTABLE_MODE = 0o755

# Affirmative answers to the confirmation prompt
CONFIRM_ANSWERS = frozenset({"y", "yes"})

# Suffix of the checksum companion published beside each archive
CHECKSUM_SUFFIX = ".sha256"

# Sentinel triple for platforms without a published artifact
UNKNOWN_TARGET = "unknown"
