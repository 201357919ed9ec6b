from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from sqlalchemy.orm import Session

from teashop.api.deps import get_db, require_admin
from teashop.schemas import AdminCategoryGroup, CategoryWithProducts, HomeRead
from teashop.services import catalog

router = APIRouter()

@router.get("/", response_model=HomeRead)
def home(db: Session = Depends(get_db)):
    return catalog.home_view(db)

@router.get("/shop", response_model=List[CategoryWithProducts])
def shop(category_id: Optional[int] = None, limit: int = Query(default=50, ge=1, le=200),
         offset: int = Query(default=0, ge=0), db: Session = Depends(get_db)):
    return catalog.shop_view(db, category_id=category_id, limit=limit, offset=offset)

@router.get("/admin", response_model=List[AdminCategoryGroup], dependencies=[Depends(require_admin)])
def admin_products(expanded: List[int] = Query(default=[]), db: Session = Depends(get_db)):
    """Products grouped by category; ``expanded=0`` opens the Uncategorized group."""
    return catalog.admin_view(db, set(expanded))
