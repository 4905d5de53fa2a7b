"""Allow running as ``python -m matrix_rain``."""

import sys

from .cli import main

sys.exit(main())
