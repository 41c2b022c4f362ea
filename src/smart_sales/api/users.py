from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from ..db.session import get_async_session
from ..exceptions import EmailAlreadyRegistered, InvalidCredentials, UnknownRole, StoreUnavailable
from ..crud.user import list_users, register_user, authenticate, route_for_role
from ..schemas.user import UserOut, UserCreate, UserLogin, LoginResult

router = APIRouter(prefix="/users", tags=["users"])

@router.get("/", response_model=List[UserOut])
async def list_users_endpoint(session: AsyncSession = Depends(get_async_session)):
    try:
        return await list_users(session)
    except StoreUnavailable as e:
        raise HTTPException(status_code=503, detail=e.detail)


@router.post("/register", response_model=UserOut, status_code=201)
async def register_endpoint(user_in: UserCreate, session: AsyncSession = Depends(get_async_session)):
    """
    Регистрация покупателя. Роль всегда buyer.
    """
    try:
        return await register_user(session, user_in.email, user_in.password)
    except EmailAlreadyRegistered as e:
        raise HTTPException(status_code=409, detail=e.detail)
    except StoreUnavailable as e:
        raise HTTPException(status_code=503, detail=e.detail)


@router.post("/login", response_model=LoginResult)
async def login_endpoint(credentials: UserLogin, session: AsyncSession = Depends(get_async_session)):
    """
    Вход по email и паролю, ответ содержит маршрут по роли:
    admin -> /summary, buyer -> /buyer.
    """
    try:
        user = await authenticate(session, credentials.email, credentials.password)
        redirect_to = route_for_role(user.role)
    except InvalidCredentials as e:
        raise HTTPException(status_code=401, detail=e.detail)
    except UnknownRole as e:
        raise HTTPException(status_code=403, detail=e.detail)
    except StoreUnavailable as e:
        raise HTTPException(status_code=503, detail=e.detail)

    return LoginResult(user=UserOut.model_validate(user), redirect_to=redirect_to)
