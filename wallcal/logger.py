import sys
import os
from loguru import logger

# Custom levels sit below DEBUG so geometry dumps stay out of normal runs
VISUAL = "VISUAL"
LAYOUT = "LAYOUT"


_LEVELS = (
    (VISUAL, 8, "🔍", "<magenta>"),
    (LAYOUT, 9, "📐", "<cyan>"),
)


def register_levels():
    """Add the custom levels once; loguru refuses to redefine a level's severity."""
    for name, no, icon, color in _LEVELS:
        try:
            logger.level(name)
        except ValueError:
            logger.level(name, no=no, icon=icon, color=color)


register_levels()


def configure_logging(
    *,
    level: str = "INFO",
    colorize: bool = True,
    format=(
        "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <7}</level> | "
        "{message}"
    ),
):
    """
    Parameters:
    - level: minimum log level to output (e.g., "DEBUG", "VISUAL").
    - colorize: whether to use ANSI colors in the console.
    - format: Loguru format string for console output.

    APP_LOG_FILE adds a plain-text file sink at the same level.
    """
    env_level = os.getenv("APP_LOG_LEVEL", "").upper()
    env_colorize = os.getenv("APP_LOG_COLORIZE", "").lower()
    env_format = os.getenv("APP_LOG_FORMAT", "")
    env_file = os.getenv("APP_LOG_FILE", "")

    effective_level = env_level if env_level else (level or "INFO")
    effective_colorize = env_colorize in ("1", "true", "yes") if env_colorize else colorize
    effective_format = env_format if env_format else format

    logger.remove()
    register_levels()

    logger.add(
        sys.stdout,
        level=effective_level,
        colorize=effective_colorize,
        format=effective_format,
        enqueue=True,
    )
    if env_file:
        logger.add(
            env_file,
            level=effective_level,
            colorize=False,
            format=effective_format,
            enqueue=True,
        )
