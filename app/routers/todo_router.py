from fastapi import APIRouter, Depends, Response

from app.dependencies import get_kv
from app.repositories.kv_repo import KVNamespace
from app.schemas.todo import Todo, TodoUpdate
from app.services.todo_service import TodoService

router = APIRouter()
service = TodoService()

@router.post("", response_model=Todo)
async def create_todo(todo_in: Todo, kv: KVNamespace = Depends(get_kv)):
    return await service.create_todo(kv, todo_in)

@router.get("", response_model=list[Todo])
async def list_todos(kv: KVNamespace = Depends(get_kv)):
    return await service.list_todos(kv)

@router.get("/{todo_id}", response_model=Todo)
async def get_todo(todo_id: str, kv: KVNamespace = Depends(get_kv)):
    return await service.get_todo(kv, todo_id)

@router.put("/{todo_id}", response_model=Todo)
async def update_todo(todo_id: str, todo_in: TodoUpdate, kv: KVNamespace = Depends(get_kv)):
    return await service.update_todo(kv, todo_id, todo_in)

@router.delete("/{todo_id}", status_code=204, response_class=Response)
async def delete_todo(todo_id: str, kv: KVNamespace = Depends(get_kv)):
    await service.delete_todo(kv, todo_id)
    return Response(status_code=204)
