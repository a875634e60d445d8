from fastapi import APIRouter, Depends
from core.dependencies import get_current_user
from schemas.user import UserOut

router = APIRouter()


def user_out(user: dict) -> dict:
    return UserOut(
        id=str(user["_id"]),
        email=user["email"],
        first_name=user.get("first_name", ""),
        last_name=user.get("last_name", ""),
        role=user.get("role", "user"),
    ).model_dump()


# GET /auth/me - verify the bearer token
@router.get("/me")
async def get_me(current_user: dict = Depends(get_current_user)):
    return {"success": True, "data": {"user": user_out(current_user)}}
