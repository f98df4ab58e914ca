"""Allow ``python -m src.cli`` execution."""

import sys

from src.cli.search import main

sys.exit(main())
