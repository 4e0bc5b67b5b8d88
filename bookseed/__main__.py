from __future__ import annotations

from bookseed.app import main


if __name__ == "__main__":
    raise SystemExit(main())
