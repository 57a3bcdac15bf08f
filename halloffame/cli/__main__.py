import sys

from halloffame.cli import main

sys.exit(main())
