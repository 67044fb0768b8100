"""CLI entrypoint for the last-interaction summary table."""

from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from people_log.cli import summary_main  # noqa: E402


if __name__ == "__main__":
    sys.exit(summary_main())
