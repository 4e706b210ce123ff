"""
CLI entry point, used by ``python -m projsearch.cli``.
"""

from .main import main

if __name__ == "__main__":
    main()
