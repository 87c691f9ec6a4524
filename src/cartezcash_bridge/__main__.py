"""Allow ``python -m cartezcash_bridge``."""

import sys

from cartezcash_bridge.cli import main

if __name__ == "__main__":
    sys.exit(main())
