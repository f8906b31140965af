#!/usr/bin/env python3
"""Launch the biquad tools from the project root.

Usage:
    uv run python main.py                         # live filtered-noise demo
    uv run python main.py render in.wav out.wav   # offline WAV render
"""

import sys

if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "render":
        import logging
        from biquad.audio.render import main
        logging.basicConfig(level=logging.DEBUG, format="%(name)s %(levelname)s: %(message)s")
        main(sys.argv[2:])
    else:
        from biquad.main import main
        main(sys.argv[1:])
