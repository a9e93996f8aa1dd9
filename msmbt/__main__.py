import sys

from msmbt.cli import main

sys.exit(main())
