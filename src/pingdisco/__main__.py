"""Allow running with: python -m pingdisco"""

import sys

from .sweep_service import main

if __name__ == "__main__":
    sys.exit(main())
