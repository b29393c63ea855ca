"""Logging configuration for the scheduling tools."""
import logging
import logging.handlers
from pathlib import Path
from src.config.settings import settings


def configure_logging(name: str, log_to_file: bool = None) -> logging.Logger:
    """
    Configure logging for a module.

    Args:
        name: Logger name (typically __name__)
        log_to_file: Also write a rotating log file under LOG_DIR
                     (default: settings.LOG_TO_FILE)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(settings.LOG_LEVEL)

    if logger.handlers:
        return logger

    # Create formatters and handlers
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_to_file is None:
        log_to_file = settings.LOG_TO_FILE

    # File handler
    if log_to_file:
        log_dir = Path(settings.LOG_DIR) / 'scheduling'
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_dir / f'{name}.log',
            maxBytes=10485760,  # 10MB
            backupCount=5,
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
