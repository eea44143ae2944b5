"""Module entrypoint for ``python -m vercelx``.

Argument parsing and command dispatch happen in ``vercelx.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
