import sys

from portprobe.cli import main

sys.exit(main())
