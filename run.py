#!/usr/bin/env python3
"""
ATM Ledger Simulator Entry Point

Starts the interactive ATM session against the configured flat-file store.
"""

import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from atm_ledger.cli import main


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nGoodbye.")
        sys.exit(0)
