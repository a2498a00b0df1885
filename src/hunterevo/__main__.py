"""Allow ``python -m hunterevo [--db PATH] [command]``."""

from __future__ import annotations

import sys

from .main import run


def main(argv: list[str] | None = None) -> None:
    """Run the CLI with the given arguments and exit with its status code."""
    raise SystemExit(run(sys.argv[1:] if argv is None else argv))


if __name__ == "__main__":  # pragma: no cover
    main()
