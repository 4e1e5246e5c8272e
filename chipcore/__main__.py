import sys

from chipcore.cli import main

sys.exit(main())
