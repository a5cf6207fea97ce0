import sys

from ghcommit.cli import main

sys.exit(main())
