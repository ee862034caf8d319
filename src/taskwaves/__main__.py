"""Allow ``python -m taskwaves``."""

from taskwaves.cli import main

if __name__ == "__main__":
    main()
