from fastapi import APIRouter, Depends

from ..accounts import AccountService
from ..schemas import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from .deps import get_accounts

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=UserResponse, status_code=201)
async def register(data: RegisterRequest, accounts: AccountService = Depends(get_accounts)):
    user = await accounts.register(
        name=data.name,
        email=data.email,
        password=data.password,
        role=data.role,
        plan=data.plan,
        state=data.state,
        city=data.city,
        latitude=data.latitude,
        longitude=data.longitude,
    )
    return UserResponse.model_validate(user)


@router.post("/login", response_model=TokenResponse)
async def login(data: LoginRequest, accounts: AccountService = Depends(get_accounts)):
    user, token = await accounts.login(data.email, data.password)
    return TokenResponse(access_token=token, user=UserResponse.model_validate(user))
