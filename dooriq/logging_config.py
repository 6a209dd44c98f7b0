# dooriq/logging_config.py
import logging
import sys

from dooriq.settings import settings

CONSOLE_HANDLER_NAME = "dooriq.console"


def setup_logging(level: str = None) -> logging.Logger:
    """
    Set up logging configuration for the application.
    """
    logger = logging.getLogger()
    logger.setLevel(level or settings.LOG_LEVEL)

    # Module reloads must not stack console handlers
    if not any(h.get_name() == CONSOLE_HANDLER_NAME for h in logger.handlers):
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.set_name(CONSOLE_HANDLER_NAME)
        console_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(console_handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)

    return logging.getLogger("dooriq")


app_logger = setup_logging()
