"""JSON file logs and a plain console stream for the survey backend."""
import json
import logging
import os
from logging.handlers import RotatingFileHandler
from tssr_shared.models import now

LOG_FILE = 'backend.log'
CONSOLE_FORMAT = '%(asctime)s %(levelname)-8s %(name)-20s %(message)s'

# Chatty third-party loggers kept at WARNING
QUIET_LOGGERS = ('werkzeug', 'sqlalchemy.engine', 'PIL')


class StructuredFormatter(logging.Formatter):
    """One JSON object per line.

    ``session_id`` passed through ``extra`` becomes its own key so a survey's
    trail can be grepped out of the file. ``extra_fields`` is merged as is.
    """

    def format(self, record):
        entry = {
            'timestamp': now().isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        session_id = getattr(record, 'session_id', None)
        if session_id is not None:
            entry['session_id'] = session_id
        entry.update(getattr(record, 'extra_fields', {}))
        if record.exc_info:
            entry['exception'] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(settings):
    """Attach the file and console handlers to the root logger.

    Level, directory and rotation come from ``settings``. Calling it again
    replaces the handlers of the previous call.
    """
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    os.makedirs(settings.log_dir, exist_ok=True)
    log_file = os.path.join(settings.log_dir, LOG_FILE)

    file_handler = RotatingFileHandler(
        log_file, maxBytes=settings.log_max_bytes, backupCount=settings.log_backups
    )
    file_handler.setFormatter(StructuredFormatter())
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))

    root = logging.getLogger()
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.addHandler(file_handler)
    root.addHandler(console_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root.info("Logging to %s at %s", log_file, logging.getLevelName(level))
    return root
