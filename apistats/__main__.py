"""Allow ``python -m apistats``."""

from apistats.cli import main

raise SystemExit(main())
