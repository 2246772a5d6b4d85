import sys

from lemkehowson.cli import main

sys.exit(main())
