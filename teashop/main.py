from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from prometheus_fastapi_instrumentator import Instrumentator

from teashop.version import VERSION
from teashop.api import auth, account, cart, categories, orders, products, storefront
from teashop.core.config import settings
from teashop.core.errors import StoreError
from teashop.core.logging import configure_logging, get_logger

configure_logging(settings.LOG_LEVEL)
logger = get_logger(__name__)

app = FastAPI(title='Tea Storefront', version=VERSION)

Instrumentator().instrument(app).expose(
    app,
    include_in_schema=False,
    endpoint="/metrics",
    should_gzip=True,
)

@app.get('/health')
def health(): return {'status':'ok'}

@app.get('/v1/_info')
def info(): return {'service':'teashop','version':VERSION}

@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    return JSONResponse(status_code=exc.status_code, content={'detail': exc.detail})

@app.exception_handler(SQLAlchemyError)
async def db_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("database error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={'detail': 'Something went wrong'})

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404 and exc.detail == 'Not Found':
        return JSONResponse(status_code=404, content={'detail': 'Page not found', 'path': request.url.path})
    return JSONResponse(status_code=exc.status_code, content={'detail': exc.detail}, headers=getattr(exc, 'headers', None))

@app.on_event("startup")
async def startup_event():
    for route in app.routes:
        if hasattr(route, "methods") and hasattr(route, "path"):
            logger.debug("%s %s", sorted(route.methods), route.path)
    logger.info("teashop %s started, category delete policy=%s", VERSION, settings.CATEGORY_DELETE_POLICY)

app.include_router(storefront.router, tags=['storefront'])
app.include_router(auth.router, prefix='/auth', tags=['auth'])
app.include_router(account.router, prefix='/account', tags=['account'])
app.include_router(orders.router, prefix='/orders', tags=['orders'])
app.include_router(cart.router, prefix='/cart', tags=['cart'])
app.include_router(categories.router, prefix='/catalog/v1/categories', tags=['categories'])
app.include_router(products.router, prefix='/catalog/v1/products', tags=['products'])
app.include_router(products.images_router, prefix='/catalog/v1/images', tags=['images'])
