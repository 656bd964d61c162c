# term_epub/utils/logging.py
import logging

LOG_FORMAT = "[%(asctime)s] %(levelname)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(verbose: bool = False) -> logging.Logger:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
    )
    logger = logging.getLogger("term_epub")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return logger
