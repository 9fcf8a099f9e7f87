from functools import lru_cache
from typing import Optional

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


class MySQLConfig(BaseModel):
    host: str = "localhost"
    user: str = "root"
    passwd: str = ""
    port: int = 3306
    db: str = "blog"

    @property
    def url(self) -> str:
        return "mysql+asyncmy://{user}:{passwd}@{host}:{port}/{db}?charset=utf8mb4".format(
            user=self.user,
            passwd=self.passwd,
            host=self.host,
            port=self.port,
            db=self.db,
        )


class JwtConfig(BaseModel):
    secret_key: str
    algorithm: str = "HS256"
    expire_minutes: int = 60


class AdminConfig(BaseModel):
    username: str
    email: str
    password: str
    full_name: str = "Blog Admin"


class BlogConfig(BaseModel):
    page_size: int = 10
    search_limit: int = 10


class Settings(BaseSettings):
    """
    기본 Configuration
    DATABASE_URL이 지정되면 mysql 설정 대신 해당 DSN을 사용합니다.
    """

    mysql: MySQLConfig = MySQLConfig()
    jwt: JwtConfig
    admin: AdminConfig
    blog: BlogConfig = BlogConfig()

    database_url: Optional[str] = None
    sql_echo: bool = False

    model_config = SettingsConfigDict(
        env_file="blog/config/.env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    @property
    def sqlalchemy_url(self) -> str:
        return self.database_url or self.mysql.url


@lru_cache
def get_settings():
    return Settings()


settings: Settings = get_settings()
