from pydantic import BaseModel, EmailStr, Field


class UserBase(BaseModel):
    email: EmailStr
    first_name: str = ""
    last_name: str = ""


class UserCreate(UserBase):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    password: str


class UserOut(UserBase):
    id: str
    role: str = "user"
