"""
Allow running chanhist as a module: python -m chanhist
"""

from .cli import main

if __name__ == "__main__":
    raise SystemExit(main())
