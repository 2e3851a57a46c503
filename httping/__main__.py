import sys

from httping.main import main

sys.exit(main())
