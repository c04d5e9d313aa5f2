"""FastAPI アプリケーション"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import LOG_LEVEL
from .database import init_db
from .errors import InfrastructureError
from .routes.regions import router as regions_router
from .routes.places import router as places_router
from .routes.geocoding import router as geocoding_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """起動時にテーブルを確認・作成"""
    init_db()
    logger.info("Database tables ready")
    yield


app = FastAPI(
    title="Kissa API",
    description="地域・場所の検索とチェックインAPI",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS（開発用に全許可、本番では制限する）
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(regions_router)
app.include_router(places_router)
app.include_router(geocoding_router)


@app.exception_handler(InfrastructureError)
async def infrastructure_error_handler(request: Request, exc: InfrastructureError):
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=503, content={"detail": "一時的に処理できません"})


@app.get("/api/v1/health")
def health():
    return {"status": "ok"}
