import logging, json, sys, time, os

from .constants import ENV_LOG_FILE, ENV_LOG_LEVEL

_FIELDS = {"ts": "%(asctime)s", "level": "%(levelname)s", "name": "%(name)s", "msg": "%(message)s"}


def _json_formatter() -> logging.Formatter:
    formatter = logging.Formatter(fmt=json.dumps(_FIELDS), datefmt="%Y-%m-%dT%H:%M:%SZ")
    formatter.converter = time.gmtime
    return formatter


def get_logger(name="TrustedHint", level=None, to_file=None):
    """
    JSON-lines logger shared by every trusted hint module.

    ``level`` defaults to TRUSTED_HINT_LOG_LEVEL (INFO) and ``to_file`` to
    TRUSTED_HINT_LOG_FILE. Handlers are attached once per logger name; a file
    handler is added later if a path shows up after the first call.
    """
    logger = logging.getLogger(name)
    level = level or os.getenv(ENV_LOG_LEVEL, "INFO")
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    to_file = to_file or os.getenv(ENV_LOG_FILE)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(_json_formatter())
        logger.addHandler(handler)

    if to_file and not any(isinstance(h, logging.FileHandler) for h in logger.handlers):
        os.makedirs(os.path.dirname(to_file) or ".", exist_ok=True)
        file_handler = logging.FileHandler(to_file)
        file_handler.setFormatter(_json_formatter())
        logger.addHandler(file_handler)

    return logger
