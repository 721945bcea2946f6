"""Shared constants for the git-phrases application.

For environment-based configuration (database settings, etc.), use the env module:
    from common.env import env
    db_type = env.database_type()
"""

from pathlib import Path

# Data directories
DATA_DIR = Path("./data")
DATABASE_PATH = DATA_DIR / "phrases.db"
DEFAULT_CONFIG_PATH = Path("./phrases.json")

# Encoding used to decode file contents when an extractor config sets none
DEFAULT_ENCODING = "utf-8"

# Path git reports for the missing side of an added or deleted file
DEV_NULL = "/dev/null"

# Object id of the empty tree; root commits are diffed against it
EMPTY_TREE_ID = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"
