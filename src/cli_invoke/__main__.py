"""cli-invoke entry point.

Supports: python -m cli_invoke
"""

import sys

from .app import main

if __name__ == "__main__":
    sys.exit(main())
