import sys

from fracbench.cli import main

sys.exit(main())
