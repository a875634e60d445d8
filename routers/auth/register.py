from fastapi import APIRouter, HTTPException
from db import db
from schemas.user import UserCreate
from core.security import get_password_hash, create_access_token
from routers.auth.me import user_out
import uuid
from datetime import datetime, timezone

router = APIRouter()

MIN_PASSWORD_LENGTH = 6


@router.post("/register", status_code=201)
async def register(user: UserCreate):
    if len(user.password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(status_code=400, detail="Password must be at least 6 characters")

    email = user.email.lower()
    existing = await db.users.find_one({"email": email})
    if existing:
        raise HTTPException(status_code=400, detail="User with this email already exists")

    new_user = {
        "_id": str(uuid.uuid4()),
        "email": email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "password": get_password_hash(user.password),
        "role": "user",
        "created_at": datetime.now(timezone.utc),
    }
    await db.users.insert_one(new_user)
    return {
        "success": True,
        "message": "User registered successfully",
        "data": {"user": user_out(new_user), "token": create_access_token(new_user["_id"])},
    }
