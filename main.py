"""
ResQ SOS Client - Root Entry Point.

All client logic lives in src/resq_client. Installed builds expose the
same entry point as the ``resq-sos`` console script.

For development: python main.py sos --mock
"""

import sys

from resq_client.presentation.cli import main

if __name__ == "__main__":
    sys.exit(main())
