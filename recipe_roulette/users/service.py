from __future__ import annotations

import logging

from sqlalchemy import or_, select, update
from sqlalchemy.exc import IntegrityError

from ..auth.passwords import (
    MAX_PASSWORD_BYTES,
    hash_password,
    password_too_long,
    verify_password,
)
from ..db import Datastore, User
from ..errors import AuthError, NotFoundError, ValidationError
from ..validation import (
    MIN_PASSWORD_LENGTH,
    optional_text,
    require_email,
    require_positive_id,
    require_text,
    require_username,
)

logger = logging.getLogger(__name__)

DUPLICATE_USER_MESSAGE = "User with the given username or email already exists"


class UserService:
    def __init__(self, datastore: Datastore) -> None:
        self.datastore = datastore

    def register_user(
        self,
        username: str,
        password: str,
        confirm_password: str,
        email: str,
    ) -> int:
        """Create a user and return its id. Usernames and emails are unique."""
        username = require_username(username)
        email = require_email(email)
        password = require_text(password, "password")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Passwords must be at least {MIN_PASSWORD_LENGTH} characters long."
            )
        if password_too_long(password):
            raise ValidationError(f"Passwords must be at most {MAX_PASSWORD_BYTES} bytes long.")
        if not isinstance(confirm_password, str) or password != confirm_password.strip():
            raise ValidationError("Passwords do not match.")

        with self.datastore.session() as session:
            existing = session.scalar(
                select(User.id).where(or_(User.username == username, User.email == email))
            )
            if existing is not None:
                raise ValidationError(DUPLICATE_USER_MESSAGE)

            user = User(username=username, email=email, password=hash_password(password))
            session.add(user)
            try:
                session.commit()
            except IntegrityError:
                # lost a race with a concurrent registration
                session.rollback()
                raise ValidationError(DUPLICATE_USER_MESSAGE) from None

        logger.info("Registered user %s (id=%d)", username, user.id)
        return user.id

    def authenticate(self, username: str, password: str) -> User:
        username = require_username(username)
        password = require_text(password, "password")
        user = self.find_user_by_username(username)
        if not verify_password(password, user.password):
            raise AuthError("Incorrect username or password. Please try again.")
        return user

    def find_user(self, user_id: int) -> User:
        user_id = require_positive_id(user_id, "user ID")
        with self.datastore.session() as session:
            user = session.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found.")
        return user

    def find_user_by_username(self, username: str) -> User:
        username = require_username(username)
        with self.datastore.session() as session:
            user = session.scalar(select(User).where(User.username == username))
        if user is None:
            raise NotFoundError("User not found.")
        return user

    def update_bio(self, user_id: int, bio: str | None) -> int:
        user_id = require_positive_id(user_id, "user ID")
        with self.datastore.session() as session:
            result = session.execute(
                update(User).where(User.id == user_id).values(bio=optional_text(bio))
            )
            session.commit()
        if result.rowcount == 0:
            raise NotFoundError("User not found or bio not updated.")
        return user_id
