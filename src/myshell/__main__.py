"""Entry point for ``python -m myshell``."""

import sys

from myshell.repl import main

sys.exit(main())
