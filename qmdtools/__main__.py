"""Allow ``python -m qmdtools``."""

import sys

from .cli import main

main(sys.argv[1:])
