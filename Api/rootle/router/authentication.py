from fastapi import APIRouter
from rootle.core.deps import UserStoreDep, CurrentUser
from rootle.services.UserService import UserService
from rootle.models.User import UserCredentials, MessageResponse, LoginResponse


router = APIRouter()
user_service = UserService()


@router.post("/register", response_model=MessageResponse, status_code=201)
async def register(credentials: UserCredentials, store: UserStoreDep):
    return user_service.register(store=store, credentials=credentials)


@router.post("/login", response_model=LoginResponse)
async def login(credentials: UserCredentials, store: UserStoreDep):
    return user_service.login(store=store, credentials=credentials)


@router.get("/protected", response_model=MessageResponse)
async def protected(current_user: CurrentUser):
    return MessageResponse(message=f"Welcome, {current_user}! You successfully accessed a protected route.")
