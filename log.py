import logging


class ColorFormatter(logging.Formatter):
    COLORS = {
        logging.DEBUG: "\033[38;21m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33;1m",
        logging.ERROR: "\033[31;1m",
        logging.CRITICAL: "\033[31;1m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord):
        log_color = self.COLORS.get(record.levelno, self.RESET)
        log_fmt = f"%(asctime)s | {log_color}%(levelname)8s{self.RESET} | %(name)s | %(message)s"
        formatter = logging.Formatter(log_fmt)
        return formatter.format(record)


class ColorLogHandler(logging.StreamHandler):
    def __init__(self):
        super().__init__()
        self.setFormatter(ColorFormatter())


def setup_logging(level: str = "INFO", systemd: bool = False, identifier: str = "geofix-agent"):
    logger = logging.getLogger()
    logger.setLevel(logging.getLevelName(level.upper()))

    if systemd:
        from systemd import journal

        logger.addHandler(journal.JournaldLogHandler(identifier=identifier))
    else:
        logger.addHandler(ColorLogHandler())
