import uvicorn
import time
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from starlette.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from bugtracker.api.analysis import router as analysis_router
from bugtracker.api.deps import get_orchestrator
from bugtracker.api.uploads import router as uploads_router
from bugtracker.api.webhook import router as webhook_router
from bugtracker.core.config import get_settings
from bugtracker.utils.logging_config import setup_logging

settings = get_settings()
setup_logging(level=settings.log_level, log_dir=settings.log_dir)
logger = logging.getLogger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Only close the orchestrator if a request ever built it
    if get_orchestrator.cache_info().currsize:
        await get_orchestrator().close()


app = FastAPI(title="Bug Tracker API", lifespan=lifespan)

# ---------------------------------------------------------------------------
# Logging Middleware
# ---------------------------------------------------------------------------
class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        client_host = request.client.host if request.client else "unknown"
        logger.info(f"Incoming: {request.method} {request.url.path} from {client_host}")

        try:
            response = await call_next(request)
            process_time = (time.time() - start_time) * 1000
            logger.info(
                f"Outgoing: {request.method} {request.url.path} - "
                f"Status: {response.status_code} - "
                f"Time: {process_time:.2f}ms"
            )
            return response
        except Exception as e:
            logger.error(f"Request failed: {request.method} {request.url.path} - Error: {str(e)}")
            raise

app.add_middleware(LoggingMiddleware)

# ---------------------------------------------------------------------------
# CORS: uploads come straight from the browser dashboard
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Health endpoint
@app.get("/health")
async def health_check():
    return {"status": "ok"}

# Register routers
app.include_router(uploads_router)
app.include_router(analysis_router)
app.include_router(webhook_router)

if __name__ == "__main__":
    uvicorn.run("main:app", host=settings.host, port=settings.port)
