from enum import StrEnum, auto

from passlib.context import CryptContext
from sqlalchemy import Column, DateTime, Enum, String

from blog.dependencies.mysql import Base
from blog.models.mixin import BaseMixin

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class UserRole(StrEnum):
    admin = auto()
    user = auto()


class User(Base, BaseMixin):
    __tablename__ = "user"

    full_name = Column(String(100), nullable=False, comment="이름(ex - 홍길동)")
    username = Column(String(50), unique=True, nullable=False, comment="사용자명")
    email = Column(String(100), unique=True, nullable=False, comment="이메일")
    hashed_password = Column(String(100), comment="암호화된 비밀번호")
    role = Column(Enum(UserRole), default=UserRole.user, comment="권한")
    last_login = Column(DateTime, nullable=True, comment="마지막 로그인 시각")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin

    def set_password(self, plain_password):
        self.hashed_password = pwd_context.hash(plain_password)

    def verify_password(self, plain_password):
        # 입력된 비밀번호가 저장된 해시와 일치하는지 확인
        return pwd_context.verify(plain_password, self.hashed_password)
