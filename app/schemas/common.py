from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class APIModel(BaseModel):
    """Base schema: snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def blank_to_none(value):
    """Treat empty strings in optional fields as absent."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


class PageMetadata(APIModel):
    current_page: int
    page_size: int
    total_count: int
    total_pages: int


class PaginatedResponse(APIModel, Generic[T]):
    data: List[T]
    metadata: PageMetadata


class MessageResponse(BaseModel):
    message: str


class ErrorMessage(BaseModel):
    error: str
    details: Optional[dict] = None
