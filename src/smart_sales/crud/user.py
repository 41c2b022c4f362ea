import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from smart_sales.db.guard import store_guard
from smart_sales.exceptions import EmailAlreadyRegistered, InvalidCredentials, UnknownRole
from smart_sales.models import User, RoleEnum

logger = logging.getLogger(__name__)

# куда отправлять пользователя после входа
ROLE_ROUTES = {
    RoleEnum.admin: "/summary",
    RoleEnum.buyer: "/buyer",
}


def _normalize_email(email: str) -> str:
    return email.strip().lower()


async def list_users(db: AsyncSession) -> List[User]:
    async with store_guard(db, "list users"):
        result = await db.execute(select(User).order_by(User.created_at, User.email))
        return result.scalars().all()


async def get_user_by_email(db: AsyncSession, email: str):
    async with store_guard(db, "read user"):
        result = await db.execute(select(User).where(User.email == _normalize_email(email)))
        return result.scalars().first()


async def register_user(
    db: AsyncSession, email: str, password: str, role: RoleEnum = RoleEnum.buyer
) -> User:
    """
    Регистрирует пользователя. С экрана регистрации всегда роль buyer,
    admin создаётся только через create_admin.
    """
    if await get_user_by_email(db, email) is not None:
        raise EmailAlreadyRegistered()

    user = User(email=_normalize_email(email), role=role)
    user.set_password(password)

    async with store_guard(db, "register user"):
        db.add(user)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise EmailAlreadyRegistered()
        await db.refresh(user)

    logger.info("User %s registered with role %s", user.email, user.role.value)
    return user


async def create_admin(db: AsyncSession, email: str, password: str) -> User:
    return await register_user(db, email, password, role=RoleEnum.admin)


async def authenticate(db: AsyncSession, email: str, password: str) -> User:
    user = await get_user_by_email(db, email)
    if user is None or not user.check_password(password):
        logger.info("Failed login for %s", _normalize_email(email))
        raise InvalidCredentials()
    return user


def route_for_role(role) -> str:
    """Маршрут после входа по роли пользователя."""
    try:
        return ROLE_ROUTES[RoleEnum(role)]
    except (ValueError, KeyError):
        raise UnknownRole()
