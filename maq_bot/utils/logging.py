from loguru import logger
import sys
from pathlib import Path
from typing import Optional


def setup_logging(log_file: Optional[str] = "bot.log", level: str = "INFO"):
    """
    Configure loguru logging.
    Logs to console and optionally to file.
    """
    # Remove default handler
    logger.remove()

    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=level,
        colorize=True,
    )

    if log_file:
        logger.add(
            Path(log_file),
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            level="DEBUG",
            rotation="10 MB",
            retention="7 days",
            encoding="utf-8",
        )

    return logger
