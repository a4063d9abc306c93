"""
Authentication API Endpoints
Registration, login and the current user's profile
"""
from fastapi import APIRouter, Depends, status

from dental_supply.core.auth import get_current_user
from dental_supply.domain.user import LoginRequest, User, UserCreate
from dental_supply.services.auth_service import AuthService

router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(data: UserCreate):
    token, user = AuthService().register(data)
    return {"token": token, "user": user.to_dict()}


@router.post("/login")
async def login(data: LoginRequest):
    token, user = AuthService().login(data)
    return {"token": token, "user": user.to_dict()}


@router.get("/profile")
async def get_profile(user: User = Depends(get_current_user)):
    return user.to_dict()
