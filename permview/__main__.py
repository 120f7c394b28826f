"""Module entrypoint for ``python -m permview``."""

from .cli import main


if __name__ == "__main__":
    main()
