from fastapi import APIRouter
from . import register, login, me

auth_router = APIRouter(prefix="/auth", tags=["Auth"])
auth_router.include_router(register.router)
auth_router.include_router(login.router)
auth_router.include_router(me.router)
