import sys

from problem_tracker.main import main

sys.exit(main())
