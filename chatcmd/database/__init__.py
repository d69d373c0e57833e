from .manager import DatabaseManager, db_manager
from .models import Base, CommandState, Guild

__all__ = [
    "DatabaseManager",
    "db_manager",
    "Base",
    "Guild",
    "CommandState",
]
