from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from teashop.api.deps import get_db, get_current_user
from teashop.core.logging import get_logger
from teashop.core.security import hash_password, verify_password, create_access_token, role_for
from teashop.db.models import User
from teashop.schemas import SignUpPayload, SignInPayload, TokenRead, UserRead

router = APIRouter()  # main.py mounts at /auth
logger = get_logger(__name__)


def _authenticate(payload: SignInPayload, db: Session) -> User:
    user = db.query(User).filter(User.email == str(payload.email).lower()).first()
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return user


def _token_for(user: User) -> TokenRead:
    access, _ = create_access_token(user.email, user.role)
    return TokenRead(access_token=access, role=user.role)


@router.post("/signup", response_model=TokenRead, status_code=status.HTTP_201_CREATED)
def signup(payload: SignUpPayload, db: Session = Depends(get_db)) -> TokenRead:
    email = str(payload.email).lower()
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=409, detail="Email already registered")

    user = User(email=email, password_hash=hash_password(payload.password), role=role_for(email))
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("user %s signed up as %s", user.id, user.role)
    return _token_for(user)


@router.post("/signin", response_model=TokenRead)
def signin(payload: SignInPayload, db: Session = Depends(get_db)) -> TokenRead:
    return _token_for(_authenticate(payload, db))


@router.post("/admin-signin", response_model=TokenRead)
def admin_signin(payload: SignInPayload, db: Session = Depends(get_db)) -> TokenRead:
    user = _authenticate(payload, db)
    if user.role != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return _token_for(user)


@router.get("/me", response_model=UserRead)
def me(user: User = Depends(get_current_user)):
    return user
