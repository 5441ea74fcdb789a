"""Entry point for running as a module."""
import sys

from taste_matcher.app import main

if __name__ == "__main__":
    sys.exit(main())
