"""Allow running as python -m namekit."""

import sys

from namekit.cli import main

sys.exit(main())
