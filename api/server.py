"""Development server entrypoint for the Flask API."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Iterable, Optional

from api.app import create_app


def main(argv: Optional[Iterable[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Run the expense tracker API")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", default=5000, type=int)
    parser.add_argument(
        "--data-dir",
        default=None,
        type=Path,
        help="Directory to store JSON data (default: $EXPENSE_TRACKER_DATA_DIR or ./data)",
    )
    parser.add_argument("--debug", action="store_true")
    args = parser.parse_args(list(argv) if argv is not None else None)

    app = create_app(args.data_dir)
    app.run(host=args.host, port=args.port, debug=args.debug)


if __name__ == "__main__":  # pragma: no cover - manual execution
    main()
