"""SQLite persistence for candidates, interviews and interview results."""
from .migrate import migrate
from .sqlite import get_conn

__all__ = ["get_conn", "migrate"]
