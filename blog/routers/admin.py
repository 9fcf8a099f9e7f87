import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from blog.dependencies.auth import get_current_admin
from blog.dependencies.mysql import get_session
from blog.models.post import Post
from blog.models.tag import Tag
from blog.models.user import User
from blog.schemas import PostDetailResponse, PostResponse, WritePostRequest
from blog.utils import slugify

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/posts", tags=["Admin"])


def _slug_from_title(title: str) -> str:
    slug = slugify(title)
    if not slug:
        raise HTTPException(
            status_code=422, detail="제목에는 문자나 숫자가 하나 이상 포함되어야 합니다."
        )
    return slug


async def _ensure_slug_available(
    slug: str, session: AsyncSession, post_id: int | None = None
) -> None:
    stmt = select(Post.id).where(Post.slug == slug)
    if post_id is not None:
        stmt = stmt.where(Post.id != post_id)
    if await session.scalar(stmt) is not None:
        raise HTTPException(
            status_code=409, detail="같은 제목(slug)의 게시글이 이미 존재합니다."
        )


async def _resolve_tags(names: list[str], session: AsyncSession) -> list[Tag]:
    """이미 있는 태그는 재사용하고, 없는 태그는 새로 만듭니다."""
    if not names:
        return []

    result = await session.scalars(select(Tag).where(Tag.name.in_(names)))
    existing = {tag.name: tag for tag in result.all()}

    tags = []
    for name in names:
        tag = existing.get(name)
        if tag is None:
            tag = Tag(name=name)
            session.add(tag)
        tags.append(tag)
    return tags


async def _get_own_post(post_id: int, current_user: User, session: AsyncSession) -> Post:
    post = await session.scalar(select(Post).where(Post.id == post_id))
    if post is None:
        raise HTTPException(status_code=404, detail="Post not found")
    if post.author_id != current_user.id:
        raise HTTPException(status_code=403, detail="작성자만 접근할 수 있습니다.")
    return post


async def _commit(session: AsyncSession) -> None:
    try:
        await session.commit()
    except IntegrityError as e:
        # 사전 확인 이후 동시 요청으로 생긴 중복
        await session.rollback()
        logger.warning("게시글 저장 중 무결성 오류: %s", e.orig)
        raise HTTPException(
            status_code=409, detail="이미 존재하는 데이터와 충돌합니다."
        ) from e


async def _reload(post_id: int, session: AsyncSession) -> Post:
    """commit 이후 server default 컬럼과 연관 컬렉션을 다시 읽어옵니다."""
    return await session.scalar(
        select(Post)
        .where(Post.id == post_id)
        .execution_options(populate_existing=True)
    )


@router.get("", response_model=list[PostResponse])
async def get_my_posts(
    current_user: User = Depends(get_current_admin),
    session: AsyncSession = Depends(get_session),
) -> list[Post]:
    """내가 작성한 게시글 목록 (발행 예정 글 포함)"""
    result = await session.scalars(
        select(Post)
        .where(Post.author_id == current_user.id)
        .order_by(Post.published_at.desc(), Post.id.desc())
    )
    return list(result.all())


@router.post("", response_model=PostDetailResponse, status_code=201)
async def write_post(
    body: WritePostRequest,
    current_user: User = Depends(get_current_admin),
    session: AsyncSession = Depends(get_session),
) -> Post:
    slug = _slug_from_title(body.title)
    await _ensure_slug_available(slug, session)

    fields = {
        "title": body.title,
        "slug": slug,
        "summary": body.summary,
        "content": body.content,
        "author": current_user,
    }
    if body.published_at is not None:
        fields["published_at"] = body.published_at
    post = Post(**fields)
    post.add_tag(*await _resolve_tags(body.tags, session))

    session.add(post)
    await _commit(session)
    logger.info("게시글 작성 완료: post_id=%d slug=%s", post.id, post.slug)
    return await _reload(post.id, session)


@router.get("/{post_id}", response_model=PostDetailResponse)
async def get_my_post(
    post_id: int,
    current_user: User = Depends(get_current_admin),
    session: AsyncSession = Depends(get_session),
) -> Post:
    return await _get_own_post(post_id, current_user, session)


@router.put("/{post_id}", response_model=PostDetailResponse)
async def edit_post(
    post_id: int,
    body: WritePostRequest,
    current_user: User = Depends(get_current_admin),
    session: AsyncSession = Depends(get_session),
) -> Post:
    post = await _get_own_post(post_id, current_user, session)
    slug = _slug_from_title(body.title)
    await _ensure_slug_available(slug, session, post_id=post.id)

    post.title = body.title
    post.slug = slug
    post.summary = body.summary
    post.content = body.content
    if body.published_at is not None:
        post.published_at = body.published_at

    # 제거를 먼저 해야 교체 도중 태그 개수 제한에 걸리지 않음
    tags = await _resolve_tags(body.tags, session)
    for tag in list(post.tags):
        if tag not in tags:
            post.remove_tag(tag)
    post.add_tag(*tags)

    await _commit(session)
    return await _reload(post.id, session)


@router.delete("/{post_id}")
async def delete_post(
    post_id: int,
    current_user: User = Depends(get_current_admin),
    session: AsyncSession = Depends(get_session),
) -> str:
    """게시글을 삭제합니다. 댓글과 태그 연결도 함께 삭제됩니다."""
    post = await _get_own_post(post_id, current_user, session)
    await session.delete(post)
    await session.commit()
    logger.info("게시글 삭제 완료: post_id=%d", post_id)
    return "post is deleted"
