"""Pydantic models for Notion API responses."""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class QueryResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    results: List[Dict[str, Any]] = Field(default_factory=list)
    has_more: bool = False
    next_cursor: Optional[str] = None


class DatabaseResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    title: List[Dict[str, Any]] = Field(default_factory=list)
    properties: Dict[str, Dict[str, Any]] = Field(default_factory=dict)


class PageResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    created_time: Optional[str] = None
    url: Optional[str] = None
    properties: Dict[str, Dict[str, Any]] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    status: Optional[int] = None
    code: Optional[str] = None
    message: str = ""
