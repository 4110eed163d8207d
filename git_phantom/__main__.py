import sys

from git_phantom.cli.main import main

sys.exit(main())
