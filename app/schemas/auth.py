from pydantic import BaseModel


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"


class AdminSession(BaseModel):
    id: str
    username: str
    session_id: str
    is_authenticated: bool = True
