"""
Logging setup for Calcpad
"""
import logging

import config


def setup_logging(level=None):
    """Configure console logging for the 'calcpad' logger tree once"""
    level_name = (level or config.LOG_LEVEL).upper()
    logger = logging.getLogger("calcpad")
    logger.setLevel(getattr(logging, level_name, logging.INFO))

    if logger.handlers:
        return logger  # already configured

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(config.LOG_FORMAT))
    logger.addHandler(handler)
    return logger
