"""Allow `python -m vmc_bosons`."""

import sys

from vmc_bosons.cli import main

sys.exit(main())
