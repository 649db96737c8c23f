"""Entry point for todo-cli when run as a module.

This allows the package to be run with: python -m todo
"""

import sys

from todo.cli import main

if __name__ == "__main__":
    sys.exit(main())
