from typing import Generic, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope shared by every JSON endpoint."""

    success: bool = True
    data: T


class MessageData(BaseModel):
    message: str


def success_response(data) -> dict:
    return {"success": True, "data": data}
