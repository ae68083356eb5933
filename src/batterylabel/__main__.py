import sys

from batterylabel.cli import main

sys.exit(main())
