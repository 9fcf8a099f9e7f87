from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator

from blog.models import comment as comment_model
from blog.models import post as post_model
from blog.models import tag as tag_model
from blog.models.mixin import KST
from blog.models.user import UserRole


def _not_blank(value: str, message: str) -> str:
    if not value.strip():
        raise ValueError(message)
    return value


# ── users ─────────────────────────────────────────────────────────────────


class SignUpRequest(BaseModel):
    username: str = Field(min_length=2, max_length=50, pattern=r"^[a-z_]+$")
    full_name: str = Field(max_length=100)
    email: str = Field(max_length=100)
    password: str = Field(min_length=6)

    @field_validator("full_name")
    @classmethod
    def full_name_not_blank(cls, value: str) -> str:
        return _not_blank(value, "The full name can not be empty.")

    @field_validator("email")
    @classmethod
    def email_has_at_sign(cls, value: str) -> str:
        if "@" not in value:
            raise ValueError("The email should look like a real email.")
        return value


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    full_name: str
    email: str
    role: UserRole
    last_login: datetime | None
    created_at: datetime | None


class AuthorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    full_name: str


# ── posts ─────────────────────────────────────────────────────────────────


class WritePostRequest(BaseModel):
    title: str = Field(max_length=255)
    summary: str = Field(max_length=post_model.SUMMARY_MAX_LENGTH)
    content: str = Field(min_length=post_model.CONTENT_MIN_LENGTH)
    published_at: Optional[datetime] = None
    tags: list[
        Annotated[
            str,
            StringConstraints(
                strip_whitespace=True,
                to_lower=True,
                max_length=tag_model.NAME_MAX_LENGTH,
            ),
        ]
    ] = []

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        return _not_blank(value, "Give your post a title!")

    @field_validator("summary")
    @classmethod
    def summary_not_blank(cls, value: str) -> str:
        return _not_blank(value, "Give your post a summary!")

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        return _not_blank(value, "Your post should have some content!")

    @field_validator("published_at")
    @classmethod
    def to_kst(cls, value: Optional[datetime]) -> Optional[datetime]:
        # DB에는 KST 기준 naive datetime으로 저장
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(KST).replace(tzinfo=None)
        return value

    @field_validator("tags")
    @classmethod
    def unique_tags(cls, tags: list[str]) -> list[str]:
        # 소문자로 정규화된 이름 기준으로 중복/빈 태그를 걸러냄
        names = [name for name in dict.fromkeys(tags) if name]
        if len(names) > post_model.MAX_TAGS:
            raise ValueError(f"Too many tags (add {post_model.MAX_TAGS} tags or less)")
        return names


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    content: str
    published_at: datetime
    author: AuthorResponse


class PostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    slug: str
    summary: str
    published_at: datetime
    author: AuthorResponse
    tags: list[str]

    @field_validator("tags", mode="before")
    @classmethod
    def tag_names(cls, tags) -> list[str]:
        return [str(tag) for tag in tags]


class PostDetailResponse(PostResponse):
    content: str
    comments: list[CommentResponse]


class PostPageResponse(BaseModel):
    items: list[PostResponse]
    page: int
    page_size: int
    total: int
    last_page: int
    has_previous: bool
    has_next: bool


# ── comments ──────────────────────────────────────────────────────────────


class WriteCommentRequest(BaseModel):
    content: str = Field(
        min_length=comment_model.CONTENT_MIN_LENGTH,
        max_length=comment_model.CONTENT_MAX_LENGTH,
    )

    @field_validator("content")
    @classmethod
    def content_is_legit(cls, value: str) -> str:
        _not_blank(value, "Please don't leave your comment blank!")
        if not comment_model.is_legit_content(value):
            raise ValueError("This comment could be spam.")
        return value
