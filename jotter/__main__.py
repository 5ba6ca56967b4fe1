import sys

from jotter.cli import main

sys.exit(main())
