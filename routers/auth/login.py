from fastapi import APIRouter, HTTPException
from db import db
from schemas.auth import LoginRequest
from core.security import verify_password, create_access_token
from routers.auth.me import user_out

router = APIRouter()


@router.post("/login")
async def login(data: LoginRequest):
    user = await db.users.find_one({"email": data.email.lower()})
    if not user or not verify_password(data.password, user["password"]):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    return {
        "success": True,
        "message": "Login successful",
        "data": {"user": user_out(user), "token": create_access_token(user["_id"])},
    }
