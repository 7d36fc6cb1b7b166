"""
Logging configuration with structured logging
"""

import logging
import logging.handlers
import sys
from datetime import datetime
from pathlib import Path
import json

import structlog


class JSONFormatter(logging.Formatter):
    """JSON formatter for file handlers"""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False)


class LoggingConfig:
    """Centralized logging configuration"""

    def __init__(self, log_level: str = "INFO", log_dir: str = "logs", log_to_files: bool = True):
        self.log_level = getattr(logging, log_level.upper(), logging.INFO)
        self.log_dir = Path(log_dir)
        self.log_to_files = log_to_files
        self.configured = False

    def configure(self):
        """Configure structlog and the standard library root logger"""
        if self.configured:
            return

        self._configure_structlog()
        self._configure_standard_logging()
        self.configured = True

    def _configure_structlog(self):
        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.stdlib.PositionalArgumentsFormatter(),
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.UnicodeDecoder(),
                structlog.processors.JSONRenderer()
            ],
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

    def _configure_standard_logging(self):
        root_logger = logging.getLogger()
        root_logger.setLevel(self.log_level)

        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(self.log_level)
        console_handler.setFormatter(logging.Formatter('%(message)s'))
        root_logger.addHandler(console_handler)

        if self.log_to_files:
            self._setup_file_handlers(root_logger)

        # SQLAlchemy echoes every statement at INFO
        for name in ("sqlalchemy.engine", "sqlalchemy.pool", "sqlalchemy.orm"):
            logging.getLogger(name).setLevel(logging.WARNING)
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
        logging.getLogger("botocore").setLevel(logging.WARNING)

    def _setup_file_handlers(self, root_logger: logging.Logger):
        self.log_dir.mkdir(parents=True, exist_ok=True)

        app_handler = logging.handlers.RotatingFileHandler(
            self.log_dir / "app.log",
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5
        )
        app_handler.setLevel(self.log_level)
        app_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(app_handler)

        error_handler = logging.handlers.RotatingFileHandler(
            self.log_dir / "error.log",
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=10
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(error_handler)


def setup_logging(log_level: str, log_dir: str, log_to_files: bool = True) -> LoggingConfig:
    """Build and apply the logging configuration"""
    config = LoggingConfig(log_level=log_level, log_dir=log_dir, log_to_files=log_to_files)
    config.configure()
    return config
