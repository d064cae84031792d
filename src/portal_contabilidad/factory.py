"""Dependency injection factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from google.cloud import firestore

from portal_contabilidad.config import Config
from portal_contabilidad.data.firestore_repository import FirestoreTaskRepository
from portal_contabilidad.data.local_repository import LocalTaskRepository
from portal_contabilidad.data.repository import TaskRepository
from portal_contabilidad.websocket.connection_manager import ConnectionManager

logger = logging.getLogger(__name__)

# Global instances for dependency injection
_config: Config | None = None
_repository: TaskRepository | None = None
_connection_manager: ConnectionManager | None = None


def get_config() -> Config:
    """Get or create Config instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def create_firestore_client(config: Config) -> firestore.Client:
    """Create a Firestore client from config.

    Without explicit credentials the client falls back to Application
    Default Credentials.
    """
    if config.firestore_credentials:
        return firestore.Client.from_service_account_json(
            config.firestore_credentials,
            project=config.firestore_project,
            database=config.firestore_database,
        )
    return firestore.Client(project=config.firestore_project, database=config.firestore_database)


def create_repository(config: Config) -> TaskRepository:
    """Create the task repository for the configured backend."""
    if config.backend == "firestore":
        logger.info(f"[Factory] Using Firestore collection '{config.collection}'")
        return FirestoreTaskRepository(create_firestore_client(config), config.collection)
    logger.info(f"[Factory] Using local task documents in {config.data_dir}")
    return LocalTaskRepository(config.data_dir)


def get_repository() -> TaskRepository:
    """Get or create TaskRepository singleton."""
    global _repository
    if _repository is None:
        _repository = create_repository(get_config())
    return _repository


def get_connection_manager() -> ConnectionManager:
    """Get or create ConnectionManager singleton."""
    global _connection_manager
    if _connection_manager is None:
        _connection_manager = ConnectionManager()
    return _connection_manager


def close_repository() -> None:
    """Release the repository's backend resources."""
    global _repository
    if _repository is None:
        return
    try:
        _repository.close()
        logger.info("[Factory] Repository closed")
    except Exception as e:
        logger.error(f"[Factory] Failed to close repository: {e}")
    _repository = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle - startup and shutdown."""
    logger.info("[Lifespan] Opening task repository...")
    get_repository()
    try:
        yield
    finally:
        logger.info("[Lifespan] Closing screen connections...")
        await get_connection_manager().close_all()
        close_repository()


def create_app() -> FastAPI:
    """Create FastAPI application (composition root)."""
    from portal_contabilidad.api.screens import router as screens_router
    from portal_contabilidad.api.tasks import router as tasks_router

    app = FastAPI(
        title="Portal de Contabilidad",
        description="Task management for the accounting department",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.include_router(tasks_router, prefix="/api")
    app.include_router(screens_router)  # WebSockets at /ws/...

    return app
