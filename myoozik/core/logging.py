# ============================================================================
# FILE: myoozik/core/logging.py
# ============================================================================
import logging
import sys
from typing import Optional
from myoozik.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_configured = False

def setup_logging(level: Optional[str] = None) -> None:
    """Configure the root logger once (stdout, level from settings.LOG_LEVEL)"""
    global _configured
    if _configured:
        return

    log_level = (level or settings.LOG_LEVEL).upper()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    root.setLevel(log_level)
    root.addHandler(handler)

    # googleapiclient logs every discovery cache miss at WARNING
    logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.ERROR)
    if not settings.DEBUG:
        logging.getLogger("httpx").setLevel(logging.WARNING)

    _configured = True
