import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from rootle.core.db import init_db
from rootle.core.errors import RootleError, InvalidInput, NotFound
from rootle.core.settings import settings
from rootle.core.storage import blob_store
from rootle.router import authentication, fileTransfer, faculties

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger("rootle")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    blob_store.init()
    if settings.uses_fallback_secret:
        logger.warning("JWT_SECRET is not set; signing tokens with the built-in development secret")
    logger.info("Rootle API started (%s)", settings.ENVIRONMENT)
    yield
    logger.info("Shutting down")

app = FastAPI(
    title="Rootle API",
    summary="Academic resource sharing API",
    openapi_url="/openapi.json",
    docs_url="/api/docs",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RootleError)
async def rootle_error_handler(request: Request, exc: RootleError):
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message, "kind": exc.kind},
        headers=headers,
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail), "kind": NotFound.__name__ if exc.status_code == 404 else "HTTPError"},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    fields = ", ".join(".".join(str(p) for p in err["loc"] if p != "body") for err in exc.errors())
    message = f"Invalid request fields: {fields}" if fields else InvalidInput.message
    return JSONResponse(status_code=400, content={"message": message, "kind": InvalidInput.__name__})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


app.include_router(authentication.router, prefix="/api", tags=["auth"])
app.include_router(fileTransfer.router, prefix="/api", tags=["file"])
app.include_router(faculties.router, prefix="/api", tags=["faculty"])


@app.get("/", tags=["Health"])
async def root():
    return {"status": "ok", "message": "Rootle API is running"}


@app.get("/health", tags=["Health"])
async def health_check():
    return {"status": "ok"}
