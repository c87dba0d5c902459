"""Entry point for running csvpreview as a module.

This allows the package to be executed as:
    python -m csvpreview [options]
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
