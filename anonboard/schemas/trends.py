from typing import Optional

from pydantic import BaseModel


class TrendRow(BaseModel):
    board: Optional[str] = None
    keyword: str
    cnt: int = 0


class RisingRow(BaseModel):
    board: Optional[str] = None
    keyword: str
    recent_cnt: int = 0
    prev_cnt: int = 0
    delta: int = 0
    ratio: Optional[float] = None
    score: float = 0.0
