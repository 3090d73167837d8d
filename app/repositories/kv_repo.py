from __future__ import annotations

from sqlalchemy import select, delete as sa_delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.errors import BackendError, ValidationError
from app.models.kv_entry import KVEntry, MAX_KEY_LENGTH


class KVNamespace:
    """
    Key-value namespace stored in the kv_entries table.

    Exposes only the primitives an edge KV store offers: get, put, delete and a
    key-only listing. Each call runs in its own session, so calls may be issued
    concurrently from one request.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], namespace: str) -> None:
        self.session_factory = session_factory
        self.namespace = namespace

    def _check_key(self, key: str) -> None:
        if not key or len(key) > MAX_KEY_LENGTH:
            raise ValidationError(f"KV key must be 1-{MAX_KEY_LENGTH} characters")

    async def get(self, key: str) -> str | None:
        self._check_key(key)
        try:
            async with self.session_factory() as session:
                entry = await session.get(KVEntry, (self.namespace, key))
                return entry.value if entry is not None else None
        except SQLAlchemyError as e:
            raise BackendError(f"KV get failed for key {key!r}: {e}") from e

    async def put(self, key: str, value: str) -> None:
        """Write value under key, replacing whatever was there."""
        self._check_key(key)
        try:
            async with self.session_factory() as session:
                await session.merge(KVEntry(namespace=self.namespace, key=key, value=value))
                await session.commit()
        except SQLAlchemyError as e:
            raise BackendError(f"KV put failed for key {key!r}: {e}") from e

    async def delete(self, key: str) -> None:
        """Remove key; a missing key is not an error."""
        self._check_key(key)
        stmt = sa_delete(KVEntry).where(
            KVEntry.namespace == self.namespace,
            KVEntry.key == key,
        )
        try:
            async with self.session_factory() as session:
                await session.execute(stmt)
                await session.commit()
        except SQLAlchemyError as e:
            raise BackendError(f"KV delete failed for key {key!r}: {e}") from e

    async def list_keys(self, prefix: str | None = None) -> list[str]:
        """
        Key names in the namespace, ordered by key. Values are not included.

        `prefix` mirrors the edge KV list filter; the Todo service lists the
        whole namespace.
        """
        stmt = select(KVEntry.key).where(KVEntry.namespace == self.namespace)
        if prefix:
            stmt = stmt.where(KVEntry.key.startswith(prefix, autoescape=True))
        stmt = stmt.order_by(KVEntry.key)
        try:
            async with self.session_factory() as session:
                res = await session.execute(stmt)
                return list(res.scalars().all())
        except SQLAlchemyError as e:
            raise BackendError(f"KV list failed: {e}") from e
