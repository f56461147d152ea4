#!/usr/bin/env python3
"""
Entry point for the gallery sync tool.
"""

import argparse
import sys

from dotenv import load_dotenv

from gallerysync.config import load_config
from gallerysync.errors import GallerySyncError
from gallerysync.reporter import ConsoleReporter, SyncReporter
from gallerysync.syncer import GallerySync


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Sync images from a SharePoint shared folder into a local gallery directory."
    )
    parser.add_argument("--env-file", default=None,
                        help="Path to a .env file (default: search for .env)")
    parser.add_argument("--quiet", action="store_true",
                        help="Do not print progress")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    # Real environment variables win over the .env file
    load_dotenv(args.env_file, override=False)

    reporter = SyncReporter() if args.quiet else ConsoleReporter()
    try:
        config = load_config()
        GallerySync(config, reporter=reporter).run()
    except GallerySyncError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
