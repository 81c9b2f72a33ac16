import sys

from kn.cli import main

sys.exit(main())
