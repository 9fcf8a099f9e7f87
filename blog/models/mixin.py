from datetime import datetime, timedelta, timezone

from sqlalchemy import Column, DateTime, Integer, func

KST = timezone(timedelta(hours=9))


def kst_now() -> datetime:
    """DB에는 tz 정보 없이 KST 기준 시각을 저장합니다."""
    return datetime.now(KST).replace(tzinfo=None)


class BaseMixin:
    """
    모든 모델(테이블)의 공통 컬럼을 정의
    """

    id = Column(Integer, primary_key=True, autoincrement=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), index=True)
    updated_at = Column(
        DateTime, server_default=func.now(), onupdate=func.now(), index=True
    )
