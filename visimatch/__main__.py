"""Module entrypoint for ``python -m visimatch``.

All argument parsing happens in ``visimatch.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
