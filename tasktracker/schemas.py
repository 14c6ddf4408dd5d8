from __future__ import annotations
from datetime import datetime
from typing import Optional, Literal
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Priority = Literal["Low", "Medium", "High"]


class _CamelModel(BaseModel):
    # camelCase on the wire, snake_case accepted too; unknown keys are dropped
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


class Credentials(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class LoginOut(BaseModel):
    token: str
    email: str


class MessageOut(BaseModel):
    message: str


class TaskCreate(_CamelModel):
    title: str = ""
    description: Optional[str] = None
    deadline: Optional[datetime] = None
    priority: Optional[Priority] = None
    category: Optional[str] = None


class TaskUpdate(_CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    deadline: Optional[datetime] = None
    priority: Optional[Priority] = None
    category: Optional[str] = None
    is_completed: Optional[bool] = None


class TaskOut(_CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: str = Field(alias="_id")
    title: str
    description: Optional[str] = None
    deadline: Optional[datetime] = None
    priority: str
    category: str
    is_completed: bool
    created_at: datetime
