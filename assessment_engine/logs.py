# logs.py

import logging

CONSOLE_FORMAT = "%(asctime)s - ASSESSMENT ENGINE %(levelname)s - %(message)s"


def setup_logging(level=logging.INFO):
    """
    Install a single console handler on the root logger.

    Library modules only ever call `logging.getLogger(__name__)`; the dashboard
    (or any other host process) calls this once at start-up.

    :param level: logging level for the root logger and the console handler
    :return: the configured root logger
    """
    logger = logging.getLogger()
    logger.setLevel(level)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    logging.getLogger(__name__).info("Assessment engine logging initialized")
    return logger
