from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from app.config import APP_ENV, CREATE_TABLES, LOG_LEVEL
from app.database import engine, init_models
from app.errors import register_error_handlers
from app.logging_config import setup_logging
from app.middleware import RequestLoggerMiddleware
from app.routers import todo_router

setup_logging(env=APP_ENV, level=LOG_LEVEL)
log = structlog.get_logger()


@asynccontextmanager
async def lifespan(application: FastAPI):
    if CREATE_TABLES:
        await init_models()
    log.info("app started", env=APP_ENV)
    yield
    await engine.dispose()


app = FastAPI(title="Todo KV API", lifespan=lifespan)
app.add_middleware(RequestLoggerMiddleware)
register_error_handlers(app)

app.include_router(todo_router.router, prefix="/todo", tags=["Todos"])

# Root
@app.get("/", response_class=PlainTextResponse)
async def index():
    return "Todo Api"
