from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from blog.dependencies.mysql import Base
from blog.models.mixin import BaseMixin, kst_now
from blog.models.user import User

CONTENT_MIN_LENGTH = 5
CONTENT_MAX_LENGTH = 10000


def is_legit_content(content: str) -> bool:
    """'@'가 포함된 댓글은 스팸으로 간주합니다."""
    return "@" not in content


class Comment(Base, BaseMixin):
    __tablename__ = "comment"

    content = Column(Text, nullable=False, comment="댓글 내용")
    published_at = Column(DateTime, nullable=False, index=True, comment="작성 시각")
    post_id = Column(
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="게시글 post.id",
    )
    author_id = Column(
        Integer,
        ForeignKey("user.id"),
        nullable=False,
        index=True,
        comment="작성자 user.id",
    )

    post = relationship("Post", back_populates="comments")
    author = relationship(User, lazy="selectin")

    def __init__(self, **kwargs):
        kwargs.setdefault("published_at", kst_now())
        super().__init__(**kwargs)
