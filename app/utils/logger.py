import logging
import os
from pathlib import Path


class LineRotatingFileHandler(logging.FileHandler):
    """File handler that rotates based on number of lines, not size."""

    def __init__(self, filename, maxLines=500, backupCount=5, encoding=None, delay=False):
        super().__init__(filename, 'a', encoding, delay)
        self.maxLines = maxLines
        self.backupCount = backupCount
        self.lineCount = self._count_lines()

    def _count_lines(self):
        try:
            with open(self.baseFilename, 'r', encoding=self.encoding) as f:
                return sum(1 for _ in f)
        except OSError:
            return 0

    def emit(self, record):
        super().emit(record)
        self.lineCount += 1
        if self.lineCount >= self.maxLines:
            self.doRollover()

    def doRollover(self):
        if self.stream:
            self.stream.close()
            self.stream = None

        # episodarr.log.4 -> .5, ... , .1 -> .2
        for i in range(self.backupCount - 1, 0, -1):
            src = f"{self.baseFilename}.{i}"
            dst = f"{self.baseFilename}.{i + 1}"
            if os.path.exists(src):
                os.replace(src, dst)

        if os.path.exists(self.baseFilename):
            os.replace(self.baseFilename, f"{self.baseFilename}.1")

        self.lineCount = 0
        if not self.delay:
            self.stream = self._open()


_logger = None
_handlers = []


def setup_logging(log_level: str = "INFO", log_dir: str = None):
    """Setup logging to file + console"""
    global _logger, _handlers

    log_level = log_level.upper()
    log_dir = Path(log_dir or os.getenv("LOG_DIR", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)

    _logger = logging.getLogger()
    _logger.setLevel(log_level)

    # Bei erneutem Aufruf alte Handler entfernen
    for handler in _handlers:
        _logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)

    log_file = log_dir / "episodarr.log"
    file_handler = LineRotatingFileHandler(log_file, maxLines=500, backupCount=5, encoding="utf-8")
    file_handler.setLevel(log_level)
    file_handler.setFormatter(formatter)

    _handlers = [console_handler, file_handler]
    for handler in _handlers:
        _logger.addHandler(handler)

    # Reduziere Spam von externen Libraries
    logging.getLogger('httpx').setLevel(logging.WARNING)

    _logger.info(f"✓ Logging initialized - Level: {log_level}, File: {log_file}")
    return _logger


def change_log_level_runtime(new_level: str):
    """Ändere Log-Level zur Laufzeit"""
    if not _logger:
        return False

    try:
        new_level = new_level.upper()
        _logger.setLevel(new_level)
        for handler in _handlers:
            handler.setLevel(new_level)

        logging.getLogger(__name__).info(f"Log-Level changed to {new_level}")
        return True
    except ValueError as e:
        logging.getLogger(__name__).error(f"Failed to change log level: {e}")
        return False
