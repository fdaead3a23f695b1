"""Schemas for projects"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from backend.models.project import ProjectStatus


class ProjectCreate(BaseModel):
    title: str = Field(..., max_length=255)
    description: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Project title is required")
        return value


class ProjectResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    owner_id: int = Field(..., serialization_alias="owner")
    member_ids: List[int] = Field(default_factory=list, serialization_alias="members")
    status: ProjectStatus
    created_at: datetime

    model_config = ConfigDict(from_attributes=True, populate_by_name=True, alias_generator=to_camel)
