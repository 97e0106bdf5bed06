from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.clients import router as clients_router
from app.api.exception_handlers import register_exception_handlers
from app.api.health import router as health_router
from app.api.products import router as products_router
from app.api.root import router as root_router
from app.api.users import router as users_router
from app.core.config import settings
from app.core.log_config import configure_logging

configure_logging(settings.LOG_LEVEL)

app = FastAPI(title="Catalog API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["ETag", "Last-Modified", "Location"],
)

register_exception_handlers(app)

app.include_router(root_router)
app.include_router(health_router)
app.include_router(products_router)
app.include_router(clients_router)
app.include_router(users_router)
