"""
Local accounts and server-side sessions.

Passwords are stored as bcrypt hashes. A session is a random id kept in the
``sessions`` table with an expiry; the id is all the client holds.
"""
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from fastapi import Depends
from sqlalchemy.orm import Session

from chronochef.core.config import get_settings
from chronochef.core.database import get_db
from chronochef.core.exceptions import InvalidCredentials
from chronochef.models.session import UserSession
from chronochef.models.user import User
from chronochef.schemas.user import UserCreate, UserLogin
from chronochef.services.storage import UserStore

logger = logging.getLogger(__name__)


# bcrypt only looks at the first 72 bytes and newer releases refuse longer input
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class AuthService:
    def __init__(self, db: Session, session_ttl: Optional[timedelta] = None):
        self.db = db
        self.users = UserStore(db)
        if session_ttl is None:
            session_ttl = timedelta(days=get_settings().session_ttl_days)
        self.session_ttl = session_ttl

    def register(self, data: UserCreate) -> User:
        """Create an account. Raises DuplicateKeyError on a taken email/username."""
        return self.users.create_user(
            username=data.username,
            email=str(data.email),
            password_hash=hash_password(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
        )

    def authenticate(self, credentials: UserLogin) -> User:
        user = None
        if credentials.username:
            user = self.users.get_user_by_username(credentials.username)
            if user is None and "@" in credentials.username:
                user = self.users.get_user_by_email(credentials.username)
        if user is None and credentials.email:
            user = self.users.get_user_by_email(credentials.email)

        if user is None or not verify_password(credentials.password, user.password_hash):
            logger.info("Failed sign-in for %r", credentials.username or credentials.email)
            raise InvalidCredentials()
        return user

    def create_session(self, user_id: str) -> str:
        sid = secrets.token_urlsafe(32)
        self.db.add(UserSession(
            sid=sid,
            user_id=user_id,
            sess={"userId": user_id},
            expire=_utcnow() + self.session_ttl,
        ))
        self.db.commit()
        logger.info("Opened session for user %s", user_id)
        return sid

    def resolve_session(self, sid: Optional[str]) -> Optional[str]:
        """User id behind a live session, or None. Expired sessions are removed."""
        if not sid:
            return None
        session = self.db.get(UserSession, sid)
        if session is None:
            return None
        if _as_utc(session.expire) <= _utcnow():
            self.db.delete(session)
            self.db.commit()
            return None
        return session.user_id

    def destroy_session(self, sid: Optional[str]) -> None:
        if not sid:
            return
        self.db.query(UserSession).filter(UserSession.sid == sid).delete(synchronize_session=False)
        self.db.commit()

    def purge_expired_sessions(self) -> int:
        count = self.db.query(UserSession).filter(
            UserSession.expire <= _utcnow()
        ).delete(synchronize_session=False)
        self.db.commit()
        return count


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(db)
