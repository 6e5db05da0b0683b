import logging
import os

from .colors import DEFAULT_SHIFT


class Config:
    SECRET_KEY = os.environ.get("FLASK_SECRET", "dev-change-me")
    CSV_FILE = os.environ.get("LAUNCHER_CSV", "bookmarks.csv")
    GRADIENT_SHIFT = float(os.environ.get("GRADIENT_SHIFT", DEFAULT_SHIFT))
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret-key"
    LOG_LEVEL = "DEBUG"


def configure_logging(level):
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
