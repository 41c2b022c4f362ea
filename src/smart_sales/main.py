import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from .api import health, users
from smart_sales.api.routes.inventory import router as inventory_router
from smart_sales.api.routes.ordering import router as ordering_router
from smart_sales.api.routes.orders import router as orders_router
from smart_sales.api.routes.reports import router as reports_router
from smart_sales.api.routes.tables import router as tables_router
from smart_sales.db.session import create_all
from smart_sales.logger import setup_logging

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_all()
    logger.info("Application started")
    yield
    logger.info("Application stopped")

app = FastAPI(title="Smart Sales POS",
              lifespan=lifespan)

# Подключаем роуты
app.include_router(health.router)
app.include_router(users.router)
app.include_router(ordering_router)
app.include_router(inventory_router)
app.include_router(tables_router)
app.include_router(orders_router)
app.include_router(reports_router)
