"""Allow running gituim with ``python -m gituim``."""

import sys

from gituim.cli import main

sys.exit(main())
