import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from restaurant.core.db import init_db, close_db
from restaurant.api.v1.menu import router as menu_router
from restaurant.api.v1.tables import router as tables_router
from restaurant.api.v1.orders import router as orders_router
from restaurant.api.v1.reservations import router as reservations_router
from restaurant.api.v1.inventory import router as inventory_router
from restaurant.core.config import PROJECT_NAME, VERSION, LOG_LEVEL, LOG_FORMAT, CORS_ORIGINS
from restaurant.core.exception_handlers import setup_exception_handlers

logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
log = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handles startup and shutdown events."""
    log.info(f"Starting {PROJECT_NAME} v{VERSION}...")
    await init_db() # Connect to DB and generate schemas
    yield
    await close_db()
    log.info(f"{PROJECT_NAME} stopped.")

app = FastAPI(
    title=PROJECT_NAME,
    version=VERSION,
    lifespan=lifespan,
    # Configure API documentation and paths
    docs_url="/docs",
    redoc_url="/redoc"
)

# Browser frontends call the API cross-origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers for modular API structure
app.include_router(menu_router, prefix="/api/v1/menu", tags=["Menu"])
app.include_router(tables_router, prefix="/api/v1/tables", tags=["Tables"])
app.include_router(orders_router, prefix="/api/v1/orders", tags=["Order Management"])
app.include_router(reservations_router, prefix="/api/v1/reservations", tags=["Reservations"])
app.include_router(inventory_router, prefix="/api/v1/inventory", tags=["Inventory"])


setup_exception_handlers(app)


@app.get("/", status_code=status.HTTP_200_OK)
async def root():
    return {"message": f"{PROJECT_NAME} is running!"}


@app.get("/health", status_code=status.HTTP_200_OK)
async def health_check():
    """Simple health check endpoint."""
    return {"status": "ok", "app_name": PROJECT_NAME}
