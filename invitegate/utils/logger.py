import logging
import sys

logger = logging.getLogger("invitegate")


def configure_logging(level: str = "INFO"):
    """Attach a stdout handler once and set the package log level."""
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)


def get_logger(name: str):
    return logger.getChild(name)


def mask_token(token) -> str:
    if not token:
        return '<none>'
    return f"{token[:6]}..."
