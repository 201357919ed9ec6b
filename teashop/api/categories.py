from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session
from typing import List, Literal, Optional
from teashop.api.deps import get_db, require_admin
from teashop.schemas import CategoryCreate, CategoryUpdate, CategoryRead
from teashop.services import catalog

router = APIRouter()

@router.get('/', response_model=List[CategoryRead])
def list_categories(db: Session = Depends(get_db)):
    return catalog.list_categories(db)

@router.get('/{category_id}', response_model=CategoryRead)
def get_category(category_id: int, db: Session = Depends(get_db)):
    return catalog.get_category(db, category_id)

@router.post('/', response_model=CategoryRead, status_code=201, dependencies=[Depends(require_admin)])
def create_category(payload: CategoryCreate, db: Session = Depends(get_db)):
    return catalog.create_category(db, payload)

@router.patch('/{category_id}', response_model=CategoryRead, dependencies=[Depends(require_admin)])
def update_category(category_id: int, payload: CategoryUpdate, db: Session = Depends(get_db)):
    return catalog.update_category(db, category_id, payload)

@router.delete('/{category_id}', status_code=204, dependencies=[Depends(require_admin)])
def delete_category(category_id: int, policy: Optional[Literal['restrict', 'cascade', 'detach']] = None, db: Session = Depends(get_db)):
    catalog.delete_category(db, category_id, policy=policy)
    return Response(status_code=204)
