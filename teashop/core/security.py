from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
from typing import Tuple
import jwt
from teashop.core.config import settings

pwd_ctx = CryptContext(schemes=['bcrypt'], deprecated='auto')

def hash_password(p: str) -> str: return pwd_ctx.hash(p)

def verify_password(p: str, h: str) -> bool: return pwd_ctx.verify(p, h)

def role_for(email: str) -> str:
    return 'admin' if email.lower() in settings.ADMIN_EMAILS else 'customer'

def create_access_token(sub: str, role: str) -> Tuple[str, datetime]:
    exp = datetime.now(timezone.utc) + timedelta(seconds=settings.ACCESS_TOKEN_EXPIRES_SECONDS)
    payload = {'sub': sub, 'role': role, 'exp': exp, 'type': 'access'}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM), exp

def decode_token(token: str) -> dict:
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
