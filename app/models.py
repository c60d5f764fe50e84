from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

# Request bodies only shape the payload; required-field checks happen in the
# services so that they surface as 400s with specific messages.


class RegisterReq(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginReq(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class PostIn(BaseModel):
    model_config = ConfigDict(extra="ignore")
    title: Optional[str] = None
    summary: Optional[str] = None
    content: Optional[str] = None
    image: Optional[str] = None


class CommentCreateReq(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    content: Optional[str] = None
    parent_comment: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("parent_comment", "parentComment"),
    )


class CommentUpdateReq(BaseModel):
    content: Optional[str] = None
