from __future__ import annotations

import logging

logger = logging.getLogger("sessionfeed.server")


def configure_logging(debug: bool = False) -> None:
    """Configure logging once; ``debug`` lowers the threshold to DEBUG."""
    if logger.handlers or logging.getLogger().handlers:
        logger.setLevel(logging.DEBUG if debug else logging.INFO)
        return

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
