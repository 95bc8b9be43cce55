import logging
import os
from typing import Dict, List

_KNOWN_LEVELS = logging.getLevelNamesMapping()

GLOBAL_LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO").upper()
if GLOBAL_LOG_LEVEL not in _KNOWN_LEVELS:
    GLOBAL_LOG_LEVEL = "INFO"

LOG_SOURCES: List[str] = [
    "AUTH",
    "HTTP",
    "INITIALIZATION",
    "OPEN_TELEMETRY",
]

SRC_LOG_LEVELS: Dict[str, str] = {}

for source in LOG_SOURCES:
    # e.g. AUTH_LOG_LEVEL=DEBUG
    source_level = os.environ.get(f"{source}_LOG_LEVEL", "").upper()
    SRC_LOG_LEVELS[source] = (
        source_level if source_level in _KNOWN_LEVELS else GLOBAL_LOG_LEVEL
    )
