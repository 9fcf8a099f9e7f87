from sqlalchemy import Column, String
from sqlalchemy.orm import validates

from blog.dependencies.mysql import Base
from blog.models.mixin import BaseMixin

NAME_MAX_LENGTH = 50


def normalize_name(name: str) -> str:
    """태그명은 앞뒤 공백을 제거한 소문자로 저장합니다."""
    return name.strip().lower()


class Tag(Base, BaseMixin):
    __tablename__ = "tag"

    name = Column(
        String(NAME_MAX_LENGTH), unique=True, nullable=False, comment="태그명"
    )

    @validates("name")
    def validate_name(self, _key, name):
        name = normalize_name(name)
        if not name or len(name) > NAME_MAX_LENGTH:
            raise ValueError(f"Tag name must be 1 to {NAME_MAX_LENGTH} characters")
        return name

    def __str__(self) -> str:
        return self.name
