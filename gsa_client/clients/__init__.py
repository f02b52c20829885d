from .base_client import ClientDelegate, HttpxDelegate
from .search_client import GSAClient

__all__ = ["ClientDelegate", "HttpxDelegate", "GSAClient"]
