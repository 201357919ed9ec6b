from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
import jwt
from teashop.db.session import SessionLocal
from teashop.core.security import decode_token
from teashop.db.models import User

security = HTTPBearer(auto_error=False)

def get_db():
    db = SessionLocal()
    try: yield db
    finally: db.close()

def get_current_user(creds: HTTPAuthorizationCredentials = Depends(security), db: Session = Depends(get_db)) -> User:
    if not creds: raise HTTPException(status_code=401, detail='Not authenticated')
    try:
        payload = decode_token(creds.credentials)
    except jwt.PyJWTError:
        raise HTTPException(status_code=401, detail='Invalid token')
    if payload.get('type') != 'access':
        raise HTTPException(status_code=401, detail='Invalid access token')
    user = db.query(User).filter(User.email == payload.get('sub')).first()
    if not user: raise HTTPException(status_code=401, detail='User not found')
    return user

def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.role != 'admin':
        raise HTTPException(status_code=403, detail='Admin only')
    return user
