from .store_client import Row, SortDirection, StoreClient, StoreFailure, StoreResult
from .session_provider import SessionProvider, SessionUser

__all__ = [
    "Row",
    "SortDirection",
    "StoreClient",
    "StoreFailure",
    "StoreResult",
    "SessionProvider",
    "SessionUser",
]
