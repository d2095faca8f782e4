import logging
import sys


def setup_logger(name="image_translator", level=logging.INFO):
    """Set up and return the package logger with a standard console handler"""
    logger = logging.getLogger(name)

    # Calling this twice must not attach a second handler
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
    return logger
