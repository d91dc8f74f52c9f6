from __future__ import annotations

import logging
import os


def setup_logging(level: str | None = None) -> None:
    """
    Minimal logging setup.
    - Uses HOLOCAMPUS_LOG_LEVEL env if level is None (default INFO).
    - Configures a single console handler via logging.basicConfig.
    """
    level_name = (level or os.getenv("HOLOCAMPUS_LOG_LEVEL") or "INFO").upper()
    # Fallback to INFO if user passes something weird
    level_value = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(
        level=level_value,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # httpx logs every request at INFO; keep it quiet unless debugging.
    if level_value > logging.DEBUG:
        logging.getLogger("httpx").setLevel(logging.WARNING)
