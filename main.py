"""
Audio Merger backend
Mixes an uploaded speech track with a music track (speech 100%, music 40%) via ffmpeg
"""

import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from backend.utils.responses import error_response
from routers.merge_router import merge_router, health_router, UPLOAD_FIELDS
from config.settings import settings
from utils.ffmpeg import ffmpeg_available
from utils.security_utils import MISSING_INPUT_MESSAGE

# ============================================================================
# LOGGING
# ============================================================================

settings.log_dir.mkdir(parents=True, exist_ok=True)
logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(settings.log_dir / "app.log"),
        logging.StreamHandler()
    ]
)
logger = logging.getLogger(__name__)

# ============================================================================
# FASTAPI APP SETUP
# ============================================================================

app = FastAPI(title="Audio Merger")


# Uncaught exception middleware - logs all unhandled exceptions and returns 500
class UncaughtExceptionMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(f"Uncaught exception: {e}\n{traceback.format_exc()}")
            return JSONResponse(
                status_code=500,
                content={"error": "Internal Server Error"}
            )


# Cross-origin isolation, required by pages that run a WebAssembly media engine
class CrossOriginIsolationMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers["Cross-Origin-Opener-Policy"] = "same-origin"
        response.headers["Cross-Origin-Embedder-Policy"] = "require-corp"
        return response


# Every error body is {"error": message}, including the ones FastAPI raises itself
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.detail}")
    return error_response(exc.detail, status=exc.status_code, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    logger.info(f"{request.method} {request.url.path} -> 400: {errors}")
    # A speech/music part that is not a file counts as a missing file
    if errors and all(err.get("loc") and err["loc"][-1] in UPLOAD_FIELDS for err in errors):
        return error_response(MISSING_INPUT_MESSAGE, status=400)
    return error_response("Invalid request", status=400)


app.add_middleware(UncaughtExceptionMiddleware)
app.add_middleware(CrossOriginIsolationMiddleware)

# CORS MUST be near the bottom
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def check_ffmpeg_on_startup():
    """Warn early when the engine binary is missing (non-fatal)"""
    if ffmpeg_available():
        logger.info(f"Startup check: ffmpeg found ({settings.ffmpeg_binary})")
    else:
        logger.warning(f"Startup check: ffmpeg not found ({settings.ffmpeg_binary}); merges will fail")


# ============================================================================
# INCLUDE ROUTERS
# ============================================================================
app.include_router(health_router)
app.include_router(merge_router)

# ============================================================================
# FRONTEND SERVING (MUST BE LAST - AFTER ALL API ROUTES)
# ============================================================================
if settings.static_dir and settings.static_dir.is_dir():
    app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="spa-root")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
