"""Write the four reference plots into the current directory."""

from __future__ import annotations

import logging

from .scenarios import run_all


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(name)s %(levelname)s %(message)s")
    run_all(".")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
