from .admins import AdminRoster
from .cooldowns import CommandStore, DatabaseCommandStore, MemoryCommandStore
from .guards import GuardOutcome, GuardPipeline
from .manager import CapabilityChecker, HikariCapabilityChecker

__all__ = [
    "AdminRoster",
    "CapabilityChecker",
    "CommandStore",
    "DatabaseCommandStore",
    "GuardOutcome",
    "GuardPipeline",
    "HikariCapabilityChecker",
    "MemoryCommandStore",
]
