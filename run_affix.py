"""
run_affix.py: CLI entry point

Runs the photo stitcher straight from a source checkout by forwarding to
`src/photo_affix/cli.py`, without installing the package.

Usage:
    python run_affix.py a.jpg b.jpg --size 1800x600 --out strip.png

For help on available options, run:
    python run_affix.py --help
"""
import sys
# Source code in src/ subdirectory
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

import photo_affix.cli as pa_cli

if __name__ == "__main__":
    sys.exit(pa_cli.main())
