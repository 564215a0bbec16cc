# telegram_hook/app_logging.py
import os
import logging
import colorlog

_LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "bold_red",
    "CRITICAL": "bold_red,bg_white",
}

_DEFAULT_FMT = "%(log_color)s%(asctime)s %(levelname)-8s %(filename)-20s: %(message)s"
_ERROR_FMT = "%(log_color)s%(asctime)s %(levelname)-8s %(filename)-20s:%(lineno)d: %(message)s"

LOGGER_NAME = "telegram-hook"


class _LevelSwitchingHandler(logging.StreamHandler):
    def __init__(self):
        # stderr: diagnostics about failed notifications belong on the error stream
        super().__init__()
        self._default = colorlog.ColoredFormatter(_DEFAULT_FMT, log_colors=_LOG_COLORS)
        self._error = colorlog.ColoredFormatter(_ERROR_FMT, log_colors=_LOG_COLORS)

    def emit(self, record: logging.LogRecord) -> None:
        self.setFormatter(self._error if record.levelno >= logging.ERROR else self._default)
        super().emit(record)


def configure_ops_logging(
        name: str = LOGGER_NAME,
        env_var: str = "LOG_LEVEL",
) -> logging.Logger:
    """
    Configure the stdlib logger used for the hook's own diagnostics.
    - Color console output on stderr
    - Never propagates, so a TelegramHandler on the root logger can't see it
    """
    level = os.getenv(env_var, "INFO").upper()
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level, logging.INFO))
    logger.propagate = False

    if not any(isinstance(h, _LevelSwitchingHandler) for h in logger.handlers):
        logger.addHandler(_LevelSwitchingHandler())

    logger.debug(f"Log level set to {level}")
    return logger


tg_logging = configure_ops_logging()
