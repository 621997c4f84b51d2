import logging
import os
from datetime import datetime

from config import IS_PRODUCTION, LOG_LEVEL, LOGS_DIR

FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
CONSOLE_FORMAT = '[%(asctime)s] %(levelname)s %(name)s: %(message)s'

def setup_logger(name='voice_tutor', log_level=None):
    """per-module logger writing a daily file under logs/ plus the console"""

    if log_level is None:
        log_level = getattr(logging, LOG_LEVEL, logging.INFO)

    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    # prevent duplicate handlers
    if logger.handlers:
        return logger

    os.makedirs(LOGS_DIR, exist_ok=True)
    log_filename = os.path.join(LOGS_DIR, f'voice_tutor_{datetime.now().strftime("%Y%m%d")}.log')
    file_handler = logging.FileHandler(log_filename)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT))

    # production keeps the console quiet, the file still gets everything
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING if IS_PRODUCTION else log_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt='%Y-%m-%dT%H:%M:%S'))

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)
    logger.propagate = False

    return logger
