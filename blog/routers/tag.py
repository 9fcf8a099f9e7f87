from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from blog.dependencies.mysql import get_session
from blog.models.tag import Tag

router = APIRouter(prefix="/tags", tags=["Tags"])


@router.get("", response_model=list[str])
async def get_tags(session: AsyncSession = Depends(get_session)) -> list[str]:
    result = await session.scalars(select(Tag).order_by(Tag.name))
    return [tag.name for tag in result.all()]
