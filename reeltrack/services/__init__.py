"""Services layer"""

from .auth_service import AuthService
from .entry_service import EntryService
from .log_service import LogService
from .transfer_service import TransferService

__all__ = [
    "AuthService",
    "EntryService",
    "LogService",
    "TransferService",
]
