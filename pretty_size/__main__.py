import sys

from pretty_size.cli import main

sys.exit(main())
