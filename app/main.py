import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import Settings, settings
from app.database import Database
from app.routers import auth, posts, qr, sections, users
from app.services.auth_service import build_password_context
from app.services.git_sync_service import GitMirror, GitPullScheduler, GitPushWorker, PendingSyncQueue
from app.services.media_storage import build_media_storage
from app.utils.response import (
    create_response,
    handle_exception,
    http_exception_handler,
    validation_exception_handler,
)
from app.utils.static import CachedStaticFiles

logger = logging.getLogger(__name__)


def create_app(app_settings: Settings = settings) -> FastAPI:
    logging.basicConfig(level=app_settings.LOG_LEVEL)

    database = Database(app_settings.DATABASE_URL)

    git_mirror = None
    pull_scheduler = None
    push_worker = None
    sync_queue = None
    if app_settings.MEDIA_BACKEND == "git":
        sync_queue = PendingSyncQueue(database.SessionLocal)
        git_mirror = GitMirror(
            app_settings.UPLOAD_DIR,
            app_settings.GIT_REPO_URL,
            branch=app_settings.GIT_BRANCH,
            username=app_settings.GIT_USERNAME,
            access_token=app_settings.GIT_ACCESS_TOKEN,
            author_email=app_settings.GIT_USER_EMAIL,
        )
        pull_scheduler = GitPullScheduler(
            git_mirror,
            interval_seconds=app_settings.GIT_PULL_INTERVAL_SECONDS,
            enabled=app_settings.GIT_SYNC_AUTO_ENABLED,
        )
        push_worker = GitPushWorker(
            git_mirror,
            sync_queue,
            interval_seconds=app_settings.GIT_PUSH_INTERVAL_SECONDS,
            enabled=app_settings.GIT_SYNC_AUTO_ENABLED,
        )

    media_storage = build_media_storage(
        app_settings,
        sync_queue=sync_queue,
        on_enqueue=push_worker.notify if push_worker else None,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database.create_all()
        if git_mirror and app_settings.GIT_SYNC_AUTO_ENABLED:
            try:
                await asyncio.to_thread(git_mirror.prepare)
            except Exception:
                logger.exception("Error preparing media repository; will retry on next sync")
            await pull_scheduler.start()
            await push_worker.start()
        logger.info("%s started with %s media storage", app_settings.PROJECT_NAME, app_settings.MEDIA_BACKEND)
        try:
            yield
        finally:
            if push_worker:
                await push_worker.stop()
            if pull_scheduler:
                await pull_scheduler.stop()
            database.dispose()

    app = FastAPI(title=app_settings.PROJECT_NAME, lifespan=lifespan)
    app.state.settings = app_settings
    app.state.database = database
    app.state.media_storage = media_storage
    app.state.password_context = build_password_context(app_settings.BCRYPT_ROUNDS)
    app.state.sync_queue = sync_queue
    app.state.git_mirror = git_mirror

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # CORS for SPA / API access
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["x-auth-token"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    # Add routes
    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(posts.router)
    app.include_router(sections.router)
    app.include_router(qr.router)

    # Serve uploaded media
    if app_settings.MEDIA_BACKEND in ("local", "git"):
        app.mount(
            app_settings.UPLOAD_URL_PREFIX,
            CachedStaticFiles(
                directory=app_settings.UPLOAD_DIR,
                check_dir=False,
                max_age=app_settings.UPLOAD_CACHE_MAX_AGE,
            ),
            name="uploads",
        )

    @app.get("/")
    def home():
        try:
            return create_response(
                {"service": app_settings.PROJECT_NAME, "mediaBackend": app_settings.MEDIA_BACKEND},
                message="Portfolio API running",
                status_code=status.HTTP_200_OK,
            )
        except Exception as exc:
            return handle_exception(exc)

    return app


app = create_app()
