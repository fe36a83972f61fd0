"""
Logging setup for the API process
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# driver chatter is only useful when chasing connection problems
NOISY_LOGGERS = ("neo4j", "uvicorn.access")


def setup_logging(log_level: str = "INFO") -> logging.Logger:
    """Configure root logging once and return the application logger"""
    level = getattr(logging, str(log_level).upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return logging.getLogger("congress_api")
