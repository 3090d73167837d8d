from app.config import TODO_KV_NAMESPACE
from app.database import AsyncSessionLocal
from app.repositories.kv_repo import KVNamespace


def get_kv() -> KVNamespace:
    """Store handle for the Todo namespace, injected per request."""
    return KVNamespace(AsyncSessionLocal, TODO_KV_NAMESPACE)
