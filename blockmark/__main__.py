"""Package entry point for ``python -m blockmark``.

WHY: Users run the converter as ``python -m blockmark source.coffee``.
Python's ``-m`` flag looks for ``__main__.py`` inside the package and
executes it.

HOW: Delegates straight to the CLI's main() function.
"""

from blockmark.cli import main

if __name__ == "__main__":
    main()
