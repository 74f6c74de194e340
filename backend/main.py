import logging

from fastapi import FastAPI, Request, status
import uvicorn
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from core.config import settings
from core.exceptions import ErrorCodes, InventoryServiceError
from core.logging_config import setup_logging
from db.database import async_session_maker, create_db_and_tables
from routers.categories import router as categories_router
from routers.products import router as products_router
from routers.reports import router as reports_router
from routers.stock_movements import router as stock_movements_router
from routers.users import router as users_router
from services.users import ensure_admin_user

setup_logging()
logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorCodes.NOT_AUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorCodes.PERMISSION_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorCodes.ADMIN_REQUIRED: status.HTTP_403_FORBIDDEN,
    ErrorCodes.PRODUCT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.CATEGORY_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.INSUFFICIENT_STOCK: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.INVALID_MOVEMENT: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.CATEGORY_IN_USE: status.HTTP_409_CONFLICT,
    ErrorCodes.PRODUCT_IN_USE: status.HTTP_409_CONFLICT,
    ErrorCodes.DUPLICATE_EMAIL: status.HTTP_409_CONFLICT,
    ErrorCodes.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_db_and_tables()
    if settings.admin_email:
        async with async_session_maker() as db:
            await ensure_admin_user(db, settings.admin_email, settings.admin_name)
    yield


app = FastAPI(
    title="Inventory Control API",
    description="Products, categories, stock movements and stock reports",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InventoryServiceError)
async def inventory_error_handler(request: Request, exc: InventoryServiceError):
    status_code = ERROR_STATUS.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "code": exc.code},
        headers=headers,
    )


app.include_router(categories_router, prefix="/api/categories", tags=["categories"])
app.include_router(products_router, prefix="/api/products", tags=["products"])
app.include_router(stock_movements_router, prefix="/api/stock-movements", tags=["stock-movements"])
app.include_router(reports_router, prefix="/api/reports", tags=["reports"])
app.include_router(users_router, prefix="/api/users", tags=["users"])

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
