# scripts/import_listings.py
#   MAX_LISTINGS=200 python scripts/import_listings.py
import sys

from feedsync.entrypoints.cli import main

if __name__ == "__main__":
    sys.exit(main())
