import sys

from .crystory import main

sys.exit(main())
