"""Allow ``python -m a2acli``."""

from a2acli.cli.main import run


if __name__ == "__main__":
    run()
