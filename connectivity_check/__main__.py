import sys

from connectivity_check.main import main

sys.exit(main())
