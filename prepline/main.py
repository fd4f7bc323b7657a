# prepline API Main Entry Point
import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from .infra.kv_store import build_store
from .infra.redis_client import close_redis
from .parsing import CorrectionStore, IngredientCatalog
from .routers.catalog import router as catalog_router
from .routers.corrections import router as corrections_router
from .routers.ready import router as ready_router
from .routers.recipes import router as recipes_router
from .services.ingestion import IngestionService
from .settings import Settings, settings

# Configure structured logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger("prepline")


def build_ingestion(config: Settings) -> IngestionService:
    """Wire one long-lived pipeline: storage, catalog, correction store, parser."""
    store = build_store(config)
    catalog = IngredientCatalog(store=store, storage_key=config.custom_ingredients_key)
    corrections = CorrectionStore(
        store,
        catalog=catalog,
        key=config.training_data_key,
        reuse_threshold=config.correction_reuse_threshold,
        similar_threshold=config.correction_similar_threshold,
    )
    return IngestionService(catalog, corrections)


@asynccontextmanager
async def lifespan(app: FastAPI):
    ingestion: IngestionService = app.state.ingestion
    loaded = await ingestion.catalog.load_custom()
    if ingestion.corrections is not None:
        await ingestion.corrections.ensure_loaded()
        logger.info(f"Loaded {len(ingestion.corrections.examples)} corrections, {loaded} custom ingredients")
    yield
    await close_redis()


# Rate limiter (per-IP)
limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])

app = FastAPI(title="prepline API", version="0.1.0", lifespan=lifespan)
app.state.limiter = limiter
app.state.ingestion = build_ingestion(settings)
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(ready_router, prefix="/api", tags=["ready"])
app.include_router(recipes_router, prefix="/api", tags=["recipes"])
app.include_router(corrections_router, prefix="/api", tags=["corrections"])
app.include_router(catalog_router, prefix="/api", tags=["catalog"])
