"""
Run the particle background in a desktop window

Usage:
    python -m background --preset hero
"""

import argparse
import logging

from .config import PRESETS
from .controller import AnimatedBackground


def main(argv=None):
    parser = argparse.ArgumentParser(description="Preview the portfolio particle background")
    parser.add_argument('--preset', choices=sorted(PRESETS), default='hero')
    parser.add_argument('--count', type=int, help="Override the particle count")
    parser.add_argument('--width', type=int, default=1280)
    parser.add_argument('--height', type=int, default=720)
    parser.add_argument('--fps', type=int, default=60)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)

    from .pygame_backend import PygameBackend

    overrides = {'count': args.count} if args.count else {}
    config = PRESETS[args.preset](**overrides)

    backend = PygameBackend(args.width, args.height)
    surface = backend.open()
    background = AnimatedBackground(backend, config)
    try:
        if not background.show(surface):
            return 1
        backend.run(fps=args.fps)
    finally:
        background.hide()
        backend.close()
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
