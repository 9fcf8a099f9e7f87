import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from blog.dependencies.auth import get_current_user
from blog.dependencies.mysql import get_session
from blog.models.comment import Comment
from blog.models.post import Post
from blog.models.user import User
from blog.schemas import CommentResponse, WriteCommentRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts/{slug}/comments", tags=["Comments"])


async def _get_post(slug: str, session: AsyncSession) -> Post:
    post = await session.scalar(select(Post).where(Post.slug == slug))
    if post is None:
        raise HTTPException(status_code=404, detail="Post not found")
    return post


@router.post("", response_model=CommentResponse, status_code=201)
async def write_comment(
    slug: str,
    body: WriteCommentRequest,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> Comment:
    post = await _get_post(slug, session)

    comment = Comment(content=body.content, author=current_user)
    post.add_comment(comment)
    # backref 할당만으로는 세션에 추가되지 않음 (SQLAlchemy 2.0)
    session.add(comment)
    await session.commit()
    logger.info("댓글 작성 완료: post_id=%d comment_id=%d", post.id, comment.id)
    return comment


@router.delete("/{comment_id}")
async def delete_comment(
    slug: str,
    comment_id: int,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> str:
    """게시글 작성자가 자신의 글에 달린 댓글을 삭제합니다."""
    post = await _get_post(slug, session)
    if post.author_id != current_user.id:
        raise HTTPException(status_code=403, detail="삭제 권한이 없습니다.")

    comment = next((c for c in post.comments if c.id == comment_id), None)
    if comment is None:
        raise HTTPException(status_code=404, detail="Comment not found")

    post.remove_comment(comment)
    await session.commit()
    return "comment is deleted"
