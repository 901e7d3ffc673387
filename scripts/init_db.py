import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from loyalty.config import get_settings
from loyalty.database.connection import build_engine
from loyalty.database.init_db import init_db
from loyalty.logging_config import setup_logging


if __name__ == "__main__":
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)
    init_db(build_engine(settings))
