"""
Logging utilities for the panel interview system.
"""
import os
import logging


def setup_logging(log_file_path: str, level: str = "INFO", console_level: int = logging.CRITICAL) -> str:
    """
    Send detailed logs to a file and keep the console quiet.

    The console belongs to the interview itself, so only messages at
    ``console_level`` or above are echoed there.

    Args:
        log_file_path: Full path to the log file
        level: Level name for the file handler ("DEBUG", "INFO", ...)
        console_level: Minimum level echoed to the console

    Returns:
        Path to the log file
    """
    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    file_handler = logging.FileHandler(log_file_path, mode='a')
    file_handler.setLevel(getattr(logging, level.upper(), logging.INFO))
    file_handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s %(name)s - %(message)s'))

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter('%(message)s'))

    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    # urllib3 logs every connection attempt at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    return log_file_path
