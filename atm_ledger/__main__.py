"""Main entry point for ``python -m atm_ledger``"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
