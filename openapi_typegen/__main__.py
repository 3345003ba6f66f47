"""Allow ``python -m openapi_typegen``."""

import sys

from .cli import main

sys.exit(main())
