from fastapi import APIRouter, Depends
from typing import List
from sqlalchemy.orm import Session

from teashop.api.deps import get_db, get_current_user
from teashop.db.models import User
from teashop.schemas import AccountRead, AddressCreate, AddressRead
from teashop.services import accounts

router = APIRouter()

@router.get("", response_model=AccountRead)
def my_account(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return AccountRead(id=user.id, email=user.email, role=user.role,
                       addresses=[AddressRead.model_validate(a) for a in accounts.list_addresses(db, user)])

@router.get("/addresses", response_model=List[AddressRead])
def list_addresses(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return accounts.list_addresses(db, user)

@router.post("/addresses", response_model=AddressRead, status_code=201)
def create_address(payload: AddressCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return accounts.create_address(db, user, payload)
