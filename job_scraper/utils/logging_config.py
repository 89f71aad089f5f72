import logging
import json
from datetime import datetime
from pathlib import Path
from typing import Optional

CONSOLE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Handlers this module installed on the root logger, so repeated setup calls don't stack them
_console_handler: Optional[logging.Handler] = None
_file_handlers: dict[str, logging.Handler] = {}


class JSONFormatter(logging.Formatter):
    def format(self, record):
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "path": record.pathname,
            "line": record.lineno
        }
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry)


def setup_logging(level: str = "INFO", log_file: Optional[str] = None):
    global _console_handler
    logger = logging.getLogger()
    logger.setLevel(level.upper())

    # Console handler
    if _console_handler is None:
        _console_handler = logging.StreamHandler()
        _console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        logger.addHandler(_console_handler)

    # File handler (JSON), one per distinct path
    if log_file:
        path = str(Path(log_file).resolve())
        if path not in _file_handlers:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(path)
            file_handler.setFormatter(JSONFormatter())
            logger.addHandler(file_handler)
            _file_handlers[path] = file_handler
