import hashlib
import hmac
import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional
from jose import jwt, JWTError, ExpiredSignatureError
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from poetportal.core import config
from poetportal.core.errors import (
    AccountSuspended,
    Forbidden,
    TokenError,
    TokenExpired,
    TokenInvalid,
    Unauthenticated,
)
from poetportal.db.session import get_db
from poetportal.db.models.user import User
from poetportal.schemas.token import TokenData

SALT_BYTES = 16
KEY_LENGTH = 64
# scrypt cost parameters; n=2**14, r=8 needs 16 MiB per derivation
SCRYPT_N = 2 ** 14
SCRYPT_R = 8
SCRYPT_P = 1

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/login", auto_error=False)


def _derive(password: str, salt_hex: str) -> bytes:
    return hashlib.scrypt(
        password.encode("utf-8"),
        salt=salt_hex.encode("utf-8"),
        n=SCRYPT_N,
        r=SCRYPT_R,
        p=SCRYPT_P,
        maxmem=64 * 1024 * 1024,
        dklen=KEY_LENGTH,
    )


def hash_password(password: str) -> str:
    salt_hex = secrets.token_hex(SALT_BYTES)
    return f"{_derive(password, salt_hex).hex()}.{salt_hex}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    derived_hex, _, salt_hex = (hashed_password or "").partition(".")
    if not derived_hex or not salt_hex:
        logging.error("Invalid stored password format")
        return False
    try:
        expected = bytes.fromhex(derived_hex)
    except ValueError:
        logging.error("Invalid stored password format")
        return False
    return hmac.compare_digest(expected, _derive(plain_password, salt_hex))


class TokenIssuer:
    """Signs and checks session tokens with one process-wide secret.

    Built once at startup from configuration. Replacing the secret (a new
    issuer) invalidates every token signed by the previous one.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", lifetime: timedelta = timedelta(hours=24)):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.lifetime = lifetime

    def issue(self, user: User) -> str:
        now = datetime.utcnow()
        claims = {
            "sub": str(user.id),
            "username": user.username,
            "is_admin": bool(user.is_admin),
            "iat": now,
            "exp": now + self.lifetime,
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def validate(self, token: str) -> TokenData:
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise TokenExpired()
        except JWTError:
            raise TokenInvalid()

        sub = payload.get("sub")
        username = payload.get("username")
        if sub is None or username is None:
            raise TokenInvalid()
        try:
            user_id = int(sub)
        except (TypeError, ValueError):
            raise TokenInvalid()
        return TokenData(user_id=user_id, username=username, is_admin=bool(payload.get("is_admin")))


token_issuer = TokenIssuer(
    config.SECRET_KEY,
    algorithm=config.ALGORITHM,
    lifetime=timedelta(hours=config.ACCESS_TOKEN_EXPIRE_HOURS),
)


def get_token_issuer() -> TokenIssuer:
    return token_issuer


def create_access_token(user: User) -> str:
    return get_token_issuer().issue(user)


def resolve_user(db: Session, token: str) -> User:
    token_data = get_token_issuer().validate(token)
    # Always re-read the row so a suspension applied after issue takes effect
    user = db.get(User, token_data.user_id)
    if user is None:
        raise Unauthenticated("User no longer exists")
    if user.is_suspended:
        raise AccountSuspended()
    return user


def get_current_user(token: Optional[str] = Depends(oauth2_scheme), db: Session = Depends(get_db)):
    if not token:
        raise Unauthenticated("Not logged in")
    return resolve_user(db, token)


def get_optional_user(token: Optional[str] = Depends(oauth2_scheme), db: Session = Depends(get_db)):
    if not token:
        return None
    try:
        return resolve_user(db, token)
    except TokenError:
        # Stale or broken tokens read public pages anonymously
        return None


def get_current_admin(current_user: User = Depends(get_current_user)):
    if not current_user.is_admin:
        raise Forbidden()
    return current_user


def require_ownership(current_user: User, owner_id: int) -> None:
    # Owners only; admins get no override for content deletion
    if current_user.id != owner_id:
        raise Forbidden()
