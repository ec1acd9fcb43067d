from pydantic import BaseModel
from typing import Any, Dict, Optional


class DeleteResult(BaseModel):
    status: str
    deleted: int
    id: Optional[str] = None


class ErrorOut(BaseModel):
    detail: str
    error: str
    context: Dict[str, Any] = {}


class HealthOut(BaseModel):
    status: str
    uptime: Optional[float] = None
