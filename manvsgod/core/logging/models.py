"""
Log entry data model.

Shared between the logging system and the API layer.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class GameLogEntry(BaseModel):
    """Log entry model"""
    id: str
    level: str  # "debug" | "info" | "warn" | "error"
    timestamp: str
    category: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)
    stack: Optional[str] = None
    session_id: Optional[str] = None
    level_id: Optional[int] = None
    action: Optional[str] = None
