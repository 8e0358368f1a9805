"""Entry point for python -m photo_renamer."""

import sys

from photo_renamer.cli import main

sys.exit(main())
