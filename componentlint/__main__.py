"""Entry point for running componentlint as a module."""

import sys

from componentlint.cli.main import main

if __name__ == "__main__":
    sys.exit(main())
