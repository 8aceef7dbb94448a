"""Birdwatch web application entry point for uvicorn."""

import logging

from birdwatch.config import ConfigManager
from birdwatch.utils.structlog_configurator import configure_structlog
from birdwatch.web.core.factory import create_app

# Configure logging before anything else imports and creates loggers
config_manager = ConfigManager()
config = config_manager.load()
configure_structlog(config)

# Our middleware already logs every request
uvicorn_access_logger = logging.getLogger("uvicorn.access")
uvicorn_access_logger.disabled = True

uvicorn_error_logger = logging.getLogger("uvicorn.error")
uvicorn_error_logger.setLevel(logging.INFO)

app = create_app()
