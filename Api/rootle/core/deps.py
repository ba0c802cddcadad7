from typing import Annotated

from fastapi import Depends, Header, Request
from fastapi.security import OAuth2PasswordBearer

from rootle.core.db import Collection, user_store, file_store
from rootle.core.security import decode_access_token
from rootle.core.storage import BlobStore, blob_store
from rootle.models.File import File
from rootle.models.User import User


def get_user_store() -> Collection[User]:
    return user_store


def get_file_store() -> Collection[File]:
    return file_store


def get_blob_store() -> BlobStore:
    return blob_store


UserStoreDep = Annotated[Collection[User], Depends(get_user_store)]
FileStoreDep = Annotated[Collection[File], Depends(get_file_store)]
BlobStoreDep = Annotated[BlobStore, Depends(get_blob_store)]

# auto_error=False: a missing bearer header is not an error when x-auth-token is sent
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/login", auto_error=False)


async def get_current_user(
    request: Request,
    bearer_token: Annotated[str | None, Depends(oauth2_scheme)],
    x_auth_token: Annotated[str | None, Header()] = None,
) -> str:
    """Resolves the caller's username from the x-auth-token header or a bearer token."""
    token = x_auth_token or bearer_token
    username = decode_access_token(token)
    request.state.username = username
    return username


CurrentUser = Annotated[str, Depends(get_current_user)]
