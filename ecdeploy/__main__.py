"""Allow ``python -m ecdeploy``."""

import sys

from ecdeploy import cli

if __name__ == "__main__":
    sys.exit(cli.main())
