import sys

from storyboard_toolkit.cli import main

sys.exit(main())
