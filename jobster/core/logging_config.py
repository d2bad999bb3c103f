import logging

from jobster.core.config import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str = None):
    """Configure root logging once for the API process.

    Uses the level from settings unless one is passed explicitly. Calling it
    again is a no-op so uvicorn reloads don't stack duplicate handlers.
    """
    if logging.getLogger().handlers:
        return
    logging.basicConfig(level=(level or get_settings().log_level).upper(), format=LOG_FORMAT)