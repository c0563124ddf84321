from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

_INPUT = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


class PostIn(BaseModel):
    model_config = _INPUT

    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1, max_length=20000)
    author: Optional[str] = Field(None, max_length=64)
    anon_id: Optional[str] = Field(None, alias="anonId", max_length=128)


class CommentIn(BaseModel):
    model_config = _INPUT

    content: str = Field(..., min_length=1, max_length=5000)
    author: Optional[str] = Field(None, max_length=64)
    anon_id: Optional[str] = Field(None, alias="anonId", max_length=128)


class PostRow(BaseModel):
    """Public shape of a post; anon ids never leave the server."""

    id: str
    board: str
    title: str
    content: str
    author: Optional[str] = None
    created_at: Optional[datetime] = None
    report_count: int = 0
    likes: int = 0


class CommentRow(BaseModel):
    id: str
    post_id: str
    board: Optional[str] = None
    content: str
    author: Optional[str] = None
    created_at: Optional[datetime] = None


class HiddenRow(BaseModel):
    id: str
    board: Optional[str] = None
    title: Optional[str] = None
    content: str
    report_count: int = 0
    hidden_reason: Optional[str] = None
    hidden_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
