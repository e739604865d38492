import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.router import api_router
from app.core.config import settings
from app.core.logging_config import setup_logging
from app.domains.documents.store import DocumentStore

logger = logging.getLogger(__name__)


async def create_store() -> DocumentStore:
    """Хранилище документов по настройкам: эмулятор в памяти или БД"""
    if settings.use_emulator:
        from app.infrastructure.memory_store import MemoryDocumentStore

        logger.info("Using in-memory document store emulator")
        return MemoryDocumentStore()

    from app.core.db import SessionLocal, init_models
    from app.db.repositories.document_repository import SqlDocumentStore

    await init_models()
    logger.info("Using SQL document store")
    return SqlDocumentStore(SessionLocal)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("Application startup sequence initiated.")
    app.state.store = await create_store()
    yield
    logger.info("Application shutdown sequence completed.")


app = FastAPI(
    title="Email Templates",
    description="Создание и просмотр шаблонов писем",
    version="1.0.0",
    lifespan=lifespan
)

# Настройка CORS для работы с frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # В продакшене указать конкретные домены
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.get("/")
async def root():
    """Корневой эндпоинт"""
    return {
        "message": "Email Templates API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }
