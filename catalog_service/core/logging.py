import sys

from loguru import logger


def setup_logging(service: str, level: str = "INFO") -> None:
    logger.remove()
    logger.configure(extra={"service": service})
    logger.add(
        sys.stdout,
        level=level,
        serialize=True,
    )
