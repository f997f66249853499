"""
Module execution entry point.

Allows running with: python -m imt_cli
"""

import sys
from imt_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
