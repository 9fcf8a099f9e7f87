from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table, Text
from sqlalchemy.orm import relationship, validates

from blog.dependencies.mysql import Base
from blog.models.comment import Comment
from blog.models.mixin import BaseMixin, kst_now
from blog.models.tag import Tag
from blog.models.user import User

SUMMARY_MAX_LENGTH = 255
CONTENT_MIN_LENGTH = 10
MAX_TAGS = 4

post_tag = Table(
    "post_tag",
    Base.metadata,
    Column(
        "post_id",
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        primary_key=True,
        comment="게시글 post.id",
    ),
    Column(
        "tag_id",
        Integer,
        ForeignKey("tag.id", ondelete="CASCADE"),
        primary_key=True,
        comment="태그 tag.id",
    ),
)


class Post(Base, BaseMixin):
    """
    블로그 게시글

    - slug는 제목으로부터 생성되며 게시글 전체에서 유일해야 합니다.
    - 댓글은 게시글이 소유합니다. 컬렉션에서 빠지거나 게시글이 삭제되면 함께 삭제됩니다.
    - 태그는 여러 게시글이 공유하며 게시글당 최대 4개까지 달 수 있습니다.
    """

    __tablename__ = "post"

    title = Column(String(255), nullable=False, comment="글 제목")
    slug = Column(String(255), unique=True, nullable=False, comment="URL용 글 식별자")
    summary = Column(String(SUMMARY_MAX_LENGTH), nullable=False, comment="글 요약")
    content = Column(Text, nullable=False, comment="글 내용")
    published_at = Column(DateTime, nullable=False, index=True, comment="발행 시각")
    author_id = Column(
        Integer,
        ForeignKey("user.id"),
        nullable=False,
        index=True,
        comment="작성자 user.id",
    )

    # async 세션에서는 lazy load가 불가능하므로 selectin으로 함께 조회
    author = relationship(User, lazy="selectin")
    comments = relationship(
        Comment,
        back_populates="post",
        cascade="all, delete-orphan",
        order_by=Comment.published_at.desc(),
        lazy="selectin",
    )
    tags = relationship(Tag, secondary=post_tag, order_by=Tag.name, lazy="selectin")

    def __init__(self, **kwargs):
        kwargs.setdefault("published_at", kst_now())
        super().__init__(**kwargs)

    @validates("content")
    def validate_content(self, _key, content):
        if content is None or len(content) < CONTENT_MIN_LENGTH:
            raise ValueError("Post too short")
        return content

    @validates("tags")
    def validate_tag(self, _key, tag):
        if len(self.tags) >= MAX_TAGS:
            raise ValueError(f"A post can have at most {MAX_TAGS} tags")
        return tag

    def add_comment(self, comment: Comment) -> None:
        comment.post = self
        if comment not in self.comments:
            self.comments.append(comment)

    def remove_comment(self, comment: Comment) -> None:
        if comment in self.comments:
            self.comments.remove(comment)

    def add_tag(self, *tags: Tag) -> None:
        for tag in tags:
            if tag not in self.tags:
                self.tags.append(tag)

    def remove_tag(self, tag: Tag) -> None:
        if tag in self.tags:
            self.tags.remove(tag)
