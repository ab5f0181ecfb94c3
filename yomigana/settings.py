"""
Settings and configuration for Yomigana.

All values are read from the environment once, at import time.
"""

import os
from pathlib import Path

# Data directory paths
PACKAGE_DIR = Path(__file__).parent
DATA_DIR = PACKAGE_DIR / "data"

# Database path - defaults to data/yomigana.db
DEFAULT_DB_PATH = DATA_DIR / "yomigana.db"

# Environment variable for custom database path
DB_PATH = Path(os.environ.get("YOMIGANA_DB_PATH", DEFAULT_DB_PATH))

# Number of dictionary lines committed per transaction while building the store
DEFAULT_BATCH_SIZE = 1000
BATCH_SIZE = int(os.environ.get("YOMIGANA_BATCH_SIZE", DEFAULT_BATCH_SIZE))

# Debug mode (echoes SQL issued by the store)
DEBUG = os.environ.get("YOMIGANA_DEBUG", "").lower() in ("1", "true", "yes")

# JMdict priority tags that mark a kanji or reading element as common
COMMON_PRIORITY_TAGS = frozenset({"news1", "ichi1", "spec1", "spec2", "gai1"})
