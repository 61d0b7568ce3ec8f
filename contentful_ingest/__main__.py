"""Allow ``python -m contentful_ingest``."""

from .main import main

main()
