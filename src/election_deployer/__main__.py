"""Allow `python -m election_deployer`."""

import sys

from .cli import main

sys.exit(main())
