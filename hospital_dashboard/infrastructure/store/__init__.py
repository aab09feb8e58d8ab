from .memory_store_client import InMemoryStoreClient
from .sql_store_client import SqlStoreClient

__all__ = ["InMemoryStoreClient", "SqlStoreClient"]
