from fastapi import APIRouter, Depends, HTTPException, Response, UploadFile, File
from typing import List, Optional
from sqlalchemy.orm import Session
from minio.error import S3Error
from teashop.api.deps import get_db, require_admin
from teashop.core.logging import get_logger
from teashop.schemas import ProductCreate, ProductUpdate, ProductRead, ImageUploadRead
from teashop.services import catalog
from teashop.services.storage import upload_bytes

router = APIRouter()
images_router = APIRouter()
logger = get_logger(__name__)

@router.get('/', response_model=List[ProductRead])
def list_products(db: Session = Depends(get_db), q: Optional[str] = None, limit: int = 50, offset: int = 0,
                  category_id: Optional[int] = None, bestseller: Optional[bool] = None):
    return catalog.list_products(db, category_id=category_id, q=q, bestseller=bestseller, limit=limit, offset=offset)

@router.get('/{product_id}', response_model=ProductRead)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return catalog.get_product(db, product_id)

@router.post('/', response_model=ProductRead, status_code=201, dependencies=[Depends(require_admin)])
def create_product(payload: ProductCreate, db: Session = Depends(get_db)):
    return catalog.create_product(db, payload)

@router.patch('/{product_id}', response_model=ProductRead, dependencies=[Depends(require_admin)])
def update_product(product_id: int, payload: ProductUpdate, db: Session = Depends(get_db)):
    return catalog.update_product(db, product_id, payload)

@router.delete('/{product_id}', status_code=204, dependencies=[Depends(require_admin)])
def delete_product(product_id: int, db: Session = Depends(get_db)):
    catalog.delete_product(db, product_id)
    return Response(status_code=204)

@images_router.post('/', response_model=ImageUploadRead, status_code=201, dependencies=[Depends(require_admin)])
async def upload_image(file: UploadFile = File(...), folder: str = 'products'):
    if folder not in ('products', 'categories'):
        raise HTTPException(status_code=422, detail='Unknown image folder')
    if not (file.content_type or '').startswith('image/'):
        raise HTTPException(status_code=422, detail='Only image uploads are accepted')
    content = await file.read()
    ext = '.' + file.filename.rsplit('.', 1)[-1].lower() if file.filename and '.' in file.filename else ''
    try:
        key, url = upload_bytes(content, file.content_type, folder=folder, ext=ext)
    except S3Error as e:
        logger.error("image upload failed: %s", e)
        raise HTTPException(status_code=502, detail='Image storage unavailable')
    return ImageUploadRead(object_key=key, url=url)
