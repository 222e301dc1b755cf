"""
Module entrypoint for the Gova CLI.

This file exists so that `python -m gova ...` works consistently in all
environments, including when the console-script wrapper is not installed.

Notes
-----
This module contains no business logic. It delegates to the CLI module.
"""

from __future__ import annotations

from gova.cli import main


def _run() -> None:
    """
    Execute the Gova command line interface.

    Raises
    ------
    SystemExit
        Always, carrying the CLI exit code.
    """
    raise SystemExit(main())


if __name__ == "__main__":
    _run()
