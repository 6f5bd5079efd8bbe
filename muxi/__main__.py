import sys

from muxi.cli import main

sys.exit(main())
