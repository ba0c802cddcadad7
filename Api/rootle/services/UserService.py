import logging

from rootle.core.db import Collection
from rootle.core.errors import InvalidInput, DuplicateAccount, InvalidCredentials
from rootle.core.security import hash_password, verify_password, create_access_token
from rootle.models.User import User, UserCredentials, MessageResponse, LoginResponse

logger = logging.getLogger(__name__)

DUMMY_SALT = "00" * 16
DUMMY_HASH = "00" * 32


class UserService:

    def _require_fields(self, credentials: UserCredentials) -> tuple[str, str]:
        if not credentials.username or not credentials.password:
            raise InvalidInput("Username and password are required")
        return credentials.username, credentials.password

    def register(self, *, store: Collection[User], credentials: UserCredentials) -> MessageResponse:
        username, password = self._require_fields(credentials)

        # checked again under the store lock below
        if store.get(username) is not None:
            raise DuplicateAccount()

        hashed_password, salt = hash_password(password)
        user = User(username=username, password_hash=hashed_password, salt=salt)

        def reject_duplicate(users: list[User]) -> None:
            if any(u.username == username for u in users):
                raise DuplicateAccount()

        store.append_one(user, guard=reject_duplicate)
        logger.info("User %s registered", username)
        return MessageResponse(message="User registered successfully")

    def verify(self, *, store: Collection[User], credentials: UserCredentials) -> str:
        """Returns the account identity, or raises one generic error for any mismatch."""
        username, password = self._require_fields(credentials)

        user = store.get(username)
        # unknown users pay the same hashing cost as wrong passwords
        salt, password_hash = (user.salt, user.password_hash) if user else (DUMMY_SALT, DUMMY_HASH)
        if not verify_password(password, salt, password_hash) or not user:
            logger.warning("Failed login for %s", username)
            raise InvalidCredentials()
        return user.username

    def login(self, *, store: Collection[User], credentials: UserCredentials) -> LoginResponse:
        username = self.verify(store=store, credentials=credentials)
        token = create_access_token(username)
        logger.info("User %s logged in", username)
        return LoginResponse(message="Logged in successfully", token=token)
