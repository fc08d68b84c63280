"""Allow ``python -m login_flow`` to start the TUI."""

import sys

from login_flow.tui.app import main

if __name__ == "__main__":
    sys.exit(main())
