import sys

from backflow.cli.main import main

sys.exit(main())
