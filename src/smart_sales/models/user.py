import enum
from sqlalchemy import Column, String, DateTime, func, Enum
from werkzeug.security import generate_password_hash, check_password_hash
from ..db.base import Base
from .ids import new_id


class RoleEnum(str, enum.Enum):
    admin = "admin"
    buyer = "buyer"


class User(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=new_id)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(Enum(RoleEnum, name="user_role"), nullable=False, default=RoleEnum.buyer)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)
