from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

TargetType = Literal["post", "comment"]

_INPUT = ConfigDict(populate_by_name=True, str_strip_whitespace=True, coerce_numbers_to_str=True)


class ReportIn(BaseModel):
    model_config = _INPUT

    type: TargetType
    target_id: str = Field(..., alias="targetId", min_length=1, max_length=64)
    board: Optional[str] = Field(None, max_length=64)
    reason: Optional[str] = Field(None, max_length=2000)
    reporter: Optional[str] = Field(None, max_length=128)


class UnhideIn(BaseModel):
    model_config = _INPUT

    type: TargetType
    target_id: str = Field(..., alias="targetId", min_length=1, max_length=64)


class ResolveIn(BaseModel):
    model_config = _INPUT

    report_id: str = Field(..., alias="reportId", min_length=1, max_length=64)


class ReportRow(BaseModel):
    id: str
    target_type: str
    target_id: str
    board: Optional[str] = None
    reason: Optional[str] = None
    reporter: Optional[str] = None
    created_at: Optional[datetime] = None
    resolved: bool = False


class ReportOutcome(BaseModel):
    report_count: int
    hidden: bool
