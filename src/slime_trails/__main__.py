import sys

from slime_trails.app import main

sys.exit(main())
