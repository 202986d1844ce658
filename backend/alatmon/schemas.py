from pydantic import BaseModel, EmailStr, Field
from typing import Any, List

class RegisterIn(BaseModel):
    username: str
    email: EmailStr
    no_telp: str | None = None
    password: str = Field(min_length=1)

class LoginIn(BaseModel):
    email: EmailStr
    password: str

class UserOut(BaseModel):
    username: str
    email: str

class RegisterOut(BaseModel):
    message: str = "User registered successfully"
    user: UserOut

class LoginOut(BaseModel):
    message: str = "Login successful"
    token: str
    user: UserOut

class AlatIn(BaseModel):
    nama_anak: str
    usia: int | None = None
    jeniskelamin: str | None = None
    idalat: str = Field(min_length=1)

class HistorySaveIn(BaseModel):
    """Reported by the watcher once a device's reading stayed unchanged.

    Example:
    {
        "idalat": "D123",
        "duration": 10
    }
    """
    idalat: str
    duration: int = Field(ge=0)

class HistoryOut(BaseModel):
    created_at: str
    duration: int

class HistoryListOut(BaseModel):
    history: List[HistoryOut]

class MonitoringOut(BaseModel):
    id: int
    idalat: str
    payload: Any  # whatever the ingester stored
    updated_at: str | None
