import logging

import uvicorn

FORMAT = "%(levelprefix)s %(asctime)s [%(threadName)s] [%(name)s] %(message)s"

# Parent of every component logger (price_search.amazon, price_search.service, ...).
PRICE_SEARCH_LOGGER = "price_search"


def get_logger(name: str = __name__, level: str = "INFO") -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(level.upper())

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = uvicorn.logging.DefaultFormatter(
            FORMAT, datefmt="%Y-%m-%d %H:%M:%S"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.propagate = False

    return logger


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Install the uvicorn-style handler on the price search logger tree."""
    return get_logger(PRICE_SEARCH_LOGGER, level)
