from sqlmodel import SQLModel


class User(SQLModel):
    username: str
    password_hash: str
    salt: str


class UserCredentials(SQLModel):
    # Optional so that missing fields reach the service as InvalidInput (400)
    username: str | None = None
    password: str | None = None


class MessageResponse(SQLModel):
    message: str


class LoginResponse(MessageResponse):
    token: str
