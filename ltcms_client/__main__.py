"""Allow ``python -m ltcms_client``."""

from __future__ import annotations

from .cli import main

main()
