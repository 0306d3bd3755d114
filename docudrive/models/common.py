from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Accepts camelCase (Google payloads) or snake_case input, dumps camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OperationResult(CamelModel, Generic[T]):
    success: bool
    data: T | None = None
    error: str | None = None

    @classmethod
    def ok(cls, data: T) -> "OperationResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "OperationResult[T]":
        return cls(success=False, error=error)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)
