"""
logging.py — Application-Wide Logging Configuration

Purpose:
- Configure one logging format for the whole backend (routes, repository, scripts).
- Keep log setup in one place so modules only ever ask for a named logger.

Format:
    timestamp | level | module | message
"""

import logging

# -----------------------------------------------------------------------------
# Log Format
# -----------------------------------------------------------------------------

LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
)

# -----------------------------------------------------------------------------
# Root Logger Initialization
# -----------------------------------------------------------------------------

def configure_logging(level: str = "INFO") -> None:
    """
    Configure root logging settings.

    Parameters:
        level (str): "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL".
            Unknown names fall back to INFO.

    Safe to call more than once (every create_app() does): the handler is
    installed on first use, later calls only adjust the root level.
    """
    root = logging.getLogger()
    previous = root.level
    resolved = getattr(logging, level.upper(), logging.INFO)
    if not isinstance(resolved, int):
        resolved = logging.INFO

    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    root.setLevel(resolved)

    if resolved != previous:
        logging.getLogger(__name__).debug(
            "Root log level %s -> %s",
            logging.getLevelName(previous),
            logging.getLevelName(resolved),
        )

# -----------------------------------------------------------------------------
# Logger Access Helper
# -----------------------------------------------------------------------------

def get_logger(name: str) -> logging.Logger:
    """
    Return a named logger.

    Usage:
        from app.core.logging import get_logger
        logger = get_logger(__name__)
    """
    return logging.getLogger(name)
