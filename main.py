"""Run catalog-localizer from a checkout: `python -m main migrate products`.

Puts `src/` on the import path (no editable install needed) and forces
UTF-8 console output, since translated texts (é, à, ñ) break cp1252
Windows consoles.
"""

from __future__ import annotations

import sys
from pathlib import Path

SRC_DIR = Path(__file__).resolve().parent / "src"


def main() -> None:
    if str(SRC_DIR) not in sys.path:
        sys.path.insert(0, str(SRC_DIR))
    if sys.platform == "win32":
        sys.stdout.reconfigure(encoding="utf-8")
        sys.stderr.reconfigure(encoding="utf-8")

    from cli.main import run  # noqa: PLC0415

    run()


if __name__ == "__main__":
    main()
