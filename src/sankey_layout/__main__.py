import sys

from sankey_layout.cli import main

sys.exit(main())
