import logging
import time

from pythonjsonlogger import jsonlogger

from .config import Settings

PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(settings: Settings) -> None:
    """Configure root logging: plain text in DEV, structured JSON in PROD."""
    log_level = getattr(logging, settings.log_level.upper())

    class CustomJsonFormatter(jsonlogger.JsonFormatter):
        def add_fields(self, log_record, record, message_dict):
            super(CustomJsonFormatter, self).add_fields(log_record, record, message_dict)
            log_record['service'] = settings.service_name
            log_record['environment'] = settings.environment
            log_record['timestamp'] = time.strftime(
                '%Y-%m-%dT%H:%M:%SZ', time.gmtime(record.created)
            )

    handler = logging.StreamHandler()
    if settings.is_prod_environment():
        handler.setFormatter(CustomJsonFormatter('%(timestamp)s %(levelname)s %(service)s %(environment)s %(name)s %(message)s'))
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Clear existing handlers to avoid duplicates
    for h in list(root_logger.handlers):
        root_logger.removeHandler(h)

    root_logger.addHandler(handler)

    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('google.auth').setLevel(logging.WARNING)
