import datetime
import logging

logger = logging.getLogger("ovh-ip-renewer")

logging_handler = logging.StreamHandler()
logging_formatter = logging.Formatter(
    fmt="%(asctime)s %(levelname)s %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
)
logging_handler.setFormatter(logging_formatter)
logger.addHandler(logging_handler)


class DuplicateFilter(logging.Filter):
    """
    lets each distinct message through once per hour
    """

    def __init__(self) -> None:
        super().__init__()
        self._hour: int | None = None
        self._seen = set[tuple[str, int, str]]()

    def filter(self, record: logging.LogRecord):
        hour = datetime.datetime.now().hour
        if hour != self._hour:
            self._hour = hour
            self._seen.clear()

        current_log = (record.module, record.levelno, record.getMessage())
        if current_log in self._seen:
            return False
        self._seen.add(current_log)
        return True


_duplicate_filter = DuplicateFilter()


def setup_logging(level: str):
    logger.setLevel(level)
    # every tick logs the same steady-state message per family
    if level != "DEBUG":
        logger.addFilter(_duplicate_filter)
    else:
        logger.removeFilter(_duplicate_filter)
