import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from loguru import logger

# Silent when imported as a library; setup_logging() turns the package on
logger.disable("icn_extract")


def setup_logging(root: Optional[str], level: str = "INFO", console: bool = True):
    logger.remove()
    if root:
        logdir = Path(root) / datetime.now().strftime("%Y/%m/%d")
        logdir.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(logdir / "icn_extract.log"),
            rotation="00:00",
            retention="14 days",
            level=level,
            enqueue=True,
            backtrace=True,
            diagnose=False,  # no variable dumps: lines carry resident names
        )
    if console:
        logger.add(sys.stderr, level=level)
    logger.enable("icn_extract")
    return logger
