"""
Script to stream a synthetic trade feed into Redis.

Usage:
    python scripts/generate_feed.py
    python scripts/generate_feed.py --tps 500 --duration 1m
    python scripts/generate_feed.py --fraud-rate 0.1 --fraud-type VELOCITY
"""

from pathlib import Path
import sys

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from feedgen.cli import main


if __name__ == "__main__":
    sys.exit(main())
