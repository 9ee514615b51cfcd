import sys

from orefmesh.cli import main

sys.exit(main())
