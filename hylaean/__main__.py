"""Allow running the simulator with ``python -m hylaean``."""

import sys

from .main import main

sys.exit(main())
