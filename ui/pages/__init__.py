"""Pages hosted by the console window."""
from .base import ConsolePage
from .login import LoginPage
from .records import RecordsPage

__all__ = ["ConsolePage", "LoginPage", "RecordsPage"]
