import sys

from ifrcgo.cli import main

sys.exit(main())
