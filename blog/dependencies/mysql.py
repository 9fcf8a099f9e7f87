import logging
import sys
from typing import AsyncGenerator

from sqlalchemy import Enum, String, Table
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from blog.config.config import settings

logger = logging.getLogger(__name__)

Base = declarative_base()

engine = create_async_engine(
    settings.sqlalchemy_url,
    pool_size=10,
    max_overflow=0,
    echo=settings.sql_echo,
    pool_pre_ping=True,
    pool_timeout=600,
)

# 라우터 밖(lifespan, 테스트)에서 세션이 필요할 때도 이 factory를 사용
async_session = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    `session: AsyncSession = Depends(get_session)`로 사용
    요청마다 세션을 열고, 응답 후 닫습니다.
    """
    async with async_session() as session:
        yield session


def _string_length(column_type) -> int | None:
    # Enum도 String 하위 타입이지만 DB마다 길이 표현이 달라 비교하지 않음
    if isinstance(column_type, String) and not isinstance(column_type, Enum):
        return column_type.length
    return None


def _compare_table(table: Table, db_columns: dict[str, dict]) -> list[str]:
    errors = []
    name = table.name

    for column in table.columns:
        db_column = db_columns.get(column.name)
        if db_column is None:
            errors.append(f"[{name}] '{column.name}' 컬럼이 DB에 없습니다.")
            continue

        if column.nullable != db_column["nullable"]:
            errors.append(
                f"[{name}.{column.name}] nullable 불일치: "
                f"모델={column.nullable}, DB={db_column['nullable']}"
            )

        model_length = _string_length(column.type)
        db_length = getattr(db_column["type"], "length", None)
        if None not in (model_length, db_length) and model_length != db_length:
            errors.append(
                f"[{name}.{column.name}] 길이 불일치: "
                f"모델={model_length}, DB={db_length}"
            )

    for column_name in sorted(db_columns.keys() - set(table.columns.keys())):
        errors.append(f"[{name}] '{column_name}' 컬럼이 모델에 없습니다.")

    return errors


def _validate_schema(sync_conn) -> list[str]:
    """
    모델과 실제 DB 스키마를 비교하여 불일치 항목을 반환합니다.
    컬럼 누락, nullable, 문자열 길이를 확인하며 아직 생성되지 않은 테이블은 건너뜁니다.
    """
    inspector = sa_inspect(sync_conn)
    existing_tables = set(inspector.get_table_names())

    errors = []
    for table in Base.metadata.sorted_tables:
        if table.name not in existing_tables:
            continue
        db_columns = {col["name"]: col for col in inspector.get_columns(table.name)}
        errors.extend(_compare_table(table, db_columns))
    return errors


async def startup() -> None:
    """스키마가 모델과 맞는지 확인한 뒤, 없는 테이블을 생성합니다."""
    async with engine.begin() as conn:
        errors = await conn.run_sync(_validate_schema)
        if errors:
            logger.error("DB 스키마와 모델 정의가 일치하지 않습니다:")
            for error in errors:
                logger.error("  - %s", error)
            logger.error("서버를 종료합니다. DB 스키마를 확인해주세요.")
            sys.exit(1)

        await conn.run_sync(Base.metadata.create_all)
        logger.info(
            "DB 테이블 초기화 완료: %s", ", ".join(sorted(Base.metadata.tables))
        )


async def shutdown() -> None:
    await engine.dispose()
