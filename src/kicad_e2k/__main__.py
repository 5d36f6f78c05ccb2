"""Allow ``python -m kicad_e2k``."""

import sys

from .cli import main

sys.exit(main())
