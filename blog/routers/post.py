import logging
import math
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from blog.config.config import settings
from blog.dependencies.mysql import get_session
from blog.models.mixin import kst_now
from blog.models.post import Post
from blog.models.tag import Tag, normalize_name
from blog.schemas import PostDetailResponse, PostPageResponse, PostResponse
from blog.utils import extract_search_terms

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["Blog"])


@router.get("", response_model=PostPageResponse)
async def get_posts(
    page: int = Query(default=1, ge=1),
    tag: Optional[str] = Query(default=None),
    session: AsyncSession = Depends(get_session),
) -> PostPageResponse:
    """
    발행된(published_at <= 현재) 게시글을 최신순으로 페이지 단위 조회합니다.
    존재하지 않는 태그명이 주어지면 태그 조건 없이 조회합니다.
    """
    page_size = settings.blog.page_size
    stmt = select(Post).where(Post.published_at <= kst_now())

    if tag is not None:
        tag_obj = await session.scalar(
            select(Tag).where(Tag.name == normalize_name(tag))
        )
        if tag_obj is not None:
            stmt = stmt.where(Post.tags.any(Tag.id == tag_obj.id))
        else:
            logger.debug("존재하지 않는 태그로 조회: %s", tag)

    total = await session.scalar(select(func.count()).select_from(stmt.subquery()))
    result = await session.scalars(
        stmt.order_by(Post.published_at.desc(), Post.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    last_page = max(1, math.ceil(total / page_size))

    return PostPageResponse(
        items=[PostResponse.model_validate(post) for post in result.all()],
        page=page,
        page_size=page_size,
        total=total,
        last_page=last_page,
        has_previous=page > 1,
        has_next=page < last_page,
    )


@router.get("/search", response_model=list[PostResponse])
async def search_posts(
    q: str = Query(default=""),
    limit: int = Query(default=settings.blog.search_limit, ge=1, le=100),
    session: AsyncSession = Depends(get_session),
) -> list[Post]:
    """제목에 검색어 중 하나라도 포함된 게시글을 최신순으로 반환합니다."""
    terms = extract_search_terms(q)
    if not terms:
        return []

    result = await session.scalars(
        select(Post)
        .where(or_(*[Post.title.contains(term, autoescape=True) for term in terms]))
        .order_by(Post.published_at.desc())
        .limit(limit)
    )
    return list(result.all())


@router.get("/{slug}", response_model=PostDetailResponse)
async def get_post(
    slug: str,
    session: AsyncSession = Depends(get_session),
) -> Post:
    post = await session.scalar(select(Post).where(Post.slug == slug))
    if post is None:
        raise HTTPException(status_code=404, detail="Post not found")
    return post
