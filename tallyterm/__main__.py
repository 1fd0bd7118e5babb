import sys

from tallyterm.cli import main

sys.exit(main())
