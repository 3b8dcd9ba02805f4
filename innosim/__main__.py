import sys

from innosim.main import main

sys.exit(main())
