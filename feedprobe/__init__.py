import logging
import os
import sys

from dotenv import load_dotenv
from pythonjsonlogger import jsonlogger

load_dotenv()

if not logging.getLogger().handlers:
    level = os.environ.get("LOG_LEVEL", "INFO").upper()
    # diagnostics are part of the CLI output, so they go to stdout
    handler = logging.StreamHandler(sys.stdout)
    if os.environ.get("LOG_FORMAT", "").lower() == "json":
        handler.setFormatter(jsonlogger.JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logging.basicConfig(level=level, handlers=[handler])
