import sys

from authsync.cli import main

sys.exit(main())
