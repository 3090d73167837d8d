import asyncio

import structlog
from pydantic import ValidationError as PydanticValidationError

from app.config import KV_FANOUT_LIMIT
from app.errors import BackendError, NotFoundError, TodoApiError, ValidationError
from app.repositories.kv_repo import KVNamespace
from app.schemas.todo import Todo, TodoUpdate

log = structlog.get_logger()


def parse_todo_id(raw: str | None) -> int:
    """Path id to int. Anything but a plain non-negative decimal is a client error."""
    if raw is None or not (raw.isascii() and raw.isdigit()):
        raise ValidationError(f"Invalid todo id: {raw!r}")
    try:
        return int(raw)
    except ValueError as e:
        # beyond the interpreter's int-string conversion limit
        raise ValidationError(f"Invalid todo id: {raw[:32]!r}... is too long") from e


class TodoService:
    def __init__(self, fanout_limit: int = KV_FANOUT_LIMIT):
        self.fanout_limit = max(1, fanout_limit)

    async def _load(self, kv: KVNamespace, key: str) -> Todo | None:
        raw = await kv.get(key)
        if raw is None:
            return None
        try:
            return Todo.model_validate_json(raw)
        except PydanticValidationError as e:
            raise BackendError(f"Stored todo at key {key!r} is not valid: {e}") from e

    async def create_todo(self, kv: KVNamespace, todo_in: Todo) -> Todo:
        # define-or-replace: an existing record at this id is overwritten
        await kv.put(todo_in.key, todo_in.model_dump_json())
        log.info("todo stored", todo_id=todo_in.id)
        return todo_in

    async def get_todo(self, kv: KVNamespace, raw_id: str | None) -> Todo:
        todo_id = parse_todo_id(raw_id)
        todo = await self._load(kv, str(todo_id))
        if todo is None:
            raise NotFoundError("Todo not found")
        return todo

    async def list_todos(self, kv: KVNamespace) -> list[Todo]:
        keys = await kv.list_keys()
        log.debug("listing todos", key_count=len(keys))
        sem = asyncio.Semaphore(self.fanout_limit)

        async def fetch(key: str) -> Todo | None:
            async with sem:
                try:
                    todo = await self._load(kv, key)
                except TodoApiError as e:
                    log.warning("dropping todo from listing", key=key, reason=e.detail)
                    return None
            if todo is None:
                # listed but gone by the time we fetched it
                log.warning("dropping todo from listing", key=key, reason="value missing")
            return todo

        results = await asyncio.gather(*(fetch(k) for k in keys), return_exceptions=True)

        todos = []
        for key, result in zip(keys, results):
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, BaseException):
                log.warning("dropping todo from listing", key=key, reason=repr(result))
                continue
            if result is not None:
                todos.append(result)
        return todos

    async def update_todo(self, kv: KVNamespace, raw_id: str | None, todo_in: TodoUpdate) -> Todo:
        todo_id = parse_todo_id(raw_id)
        key = str(todo_id)
        if await self._load(kv, key) is None:
            raise NotFoundError("Todo not found")

        todo = Todo(id=todo_id, name=todo_in.name, description=todo_in.description)
        await kv.put(key, todo.model_dump_json())
        log.info("todo updated", todo_id=todo_id)
        return todo

    async def delete_todo(self, kv: KVNamespace, raw_id: str | None) -> None:
        todo_id = parse_todo_id(raw_id)
        await kv.delete(str(todo_id))
        log.info("todo deleted", todo_id=todo_id)
