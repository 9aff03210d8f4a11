from typing import Annotated, Generic, Optional, TypeVar

from pydantic import BaseModel, StringConstraints

T = TypeVar("T")

# Required free text: surrounding whitespace is stripped before the length check,
# so "   " counts as missing
NonBlankText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
NonBlankLabel = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
NonBlankTitle = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
NonBlankNote = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=5000)]


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope returned by every endpoint: {status, message?, data}."""

    status: str = "success"
    message: Optional[str] = None
    data: Optional[T] = None


class MessageResponse(BaseModel):
    status: str = "success"
    message: str
