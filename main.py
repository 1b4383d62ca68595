"""
Launcher for running TagMark from a source checkout.
"""

import sys

from tagmark.main import main


if __name__ == '__main__':
    sys.exit(main())
