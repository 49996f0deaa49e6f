from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fleetfusion.core.config import settings
from fleetfusion.core.database import create_tables, dispose_engine
from fleetfusion.core.redis import close_redis
from fleetfusion.api.v1.auth import router as auth_router
from fleetfusion.api.v1.organizations import router as organizations_router
from fleetfusion.api.v1.drivers import router as drivers_router
from fleetfusion.api.v1.vehicles import router as vehicles_router
from fleetfusion.api.v1.hos import router as hos_router
from fleetfusion.api.v1.compliance import router as compliance_router
from fleetfusion.api.v1.audit import router as audit_router
from fleetfusion.api.v1.webhooks import router as webhooks_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create tables on startup (SQLite / local development)
    await create_tables()
    yield
    await close_redis()
    await dispose_engine()


app = FastAPI(
    title="FleetFusion API",
    description="Fleet management: drivers, vehicles, Hours of Service and compliance",
    version="1.0.0",
    lifespan=lifespan,
    # Swagger UI only in development – set DEBUG=false in production
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

API_PREFIX = "/api/v1"

app.include_router(auth_router, prefix=API_PREFIX)
app.include_router(organizations_router, prefix=API_PREFIX)
app.include_router(drivers_router, prefix=API_PREFIX)
app.include_router(vehicles_router, prefix=API_PREFIX)
app.include_router(hos_router, prefix=API_PREFIX)
app.include_router(compliance_router, prefix=API_PREFIX)
app.include_router(audit_router, prefix=API_PREFIX)
app.include_router(webhooks_router, prefix=API_PREFIX)


@app.get("/health")
async def health_check():
    return {"status": "ok", "service": "FleetFusion API", "version": "1.0.0"}
