from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from framework.config import settings
from framework.database.manager import DatabaseManager
from framework.middleware.logging_md import LoggingMiddleware
from framework.logging.logger import LogConfig, get_logger
from framework.exceptions.handler import BusinessException, global_exception_handler
from framework.response import ResponseModel
from apps.users.api.router import auth_router, router as users_router
from apps.users.migration import migrate_users
from apps.reports.api.router import router as reports_router

# Initialize logging configuration
LogConfig.setup_logging()
logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Prepare the document and run the one-time user migration before serving."""
    manager = DatabaseManager.get_instance()
    await manager.json.connect()
    await migrate_users(manager.json)
    logger.info(f"{settings.APP_NAME} ready, document at {manager.json.path}")
    yield
    await manager.json.disconnect()


app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Register global exception handlers
app.add_exception_handler(BusinessException, global_exception_handler)
app.add_exception_handler(RequestValidationError, global_exception_handler)
app.add_exception_handler(StarletteHTTPException, global_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

app.add_middleware(LoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount routers (prefixes from config)
app.include_router(auth_router, prefix=settings.AUTH_PREFIX, tags=["Auth"])
app.include_router(users_router, prefix=settings.USERS_PREFIX, tags=["Users"])
app.include_router(reports_router, prefix=settings.REPORTS_PREFIX, tags=["Reports"])


@app.get("/test", tags=["Health"])
async def test_route():
    """Liveness check."""
    return ResponseModel.success("Test route successful!")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
