import sys

from composables.cli import main

sys.exit(main())
