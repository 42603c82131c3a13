import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .api.error_handlers import register_error_handlers
from .api.routes import auth, users, families, movements, reports, dwellings, contracts
from .core.config import settings
from .db.base import Base
from .db.session import engine

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="HomeLedger API", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_error_handlers(app)

@app.on_event("startup")
def on_startup():
    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ready")

app.include_router(auth.router, prefix="/auth", tags=["auth"])
app.include_router(users.router, prefix="/users", tags=["users"])
app.include_router(families.router, prefix="/families", tags=["families"])
app.include_router(reports.router, prefix="/families", tags=["reports"])
app.include_router(movements.router, tags=["movements"])
app.include_router(dwellings.router, prefix="/dwellings", tags=["dwellings"])
app.include_router(contracts.router, prefix="/contracts", tags=["contracts"])
