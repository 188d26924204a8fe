"""Entry point for ``python -m unvenv``."""

from unvenv.cli import run

if __name__ == "__main__":
    run()
