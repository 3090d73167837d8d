from pydantic import BaseModel, Field


class TodoBase(BaseModel):
    name: str
    description: str


class TodoUpdate(TodoBase):
    pass


class Todo(TodoBase):
    # strict: "5" or true in a request body is not an id
    id: int = Field(ge=0, strict=True)

    @property
    def key(self) -> str:
        return str(self.id)
