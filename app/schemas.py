from pydantic import BaseModel
from typing import Optional

class HealthResponse(BaseModel):
    status: str
    message: str
    timestamp: str
    environment: str

class AdminLoginRequest(BaseModel):
    username: str
    password: str

class AdminLoginResponse(BaseModel):
    token: str
    role: str
    username: str
    full_name: Optional[str] = None

class AdminVerifyResponse(BaseModel):
    valid: bool
    role: Optional[str] = None
    username: Optional[str] = None
