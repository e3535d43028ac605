import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, File, Form, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from .config import API_KEY_ENV, Settings
from .errors import ConfigurationError, UpstreamError, ValidationError
from .gateway import TransformationGateway, TransformFailure
from .prompts import DEFAULT_STYLE, DEFAULT_WALL_COLOR, STYLE_OPTIONS, WALL_COLOR_OPTIONS
from .validation import ALLOWED_TYPES, MAX_BYTES

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"

FAILURE_STATUS: dict[str, int] = {
    ConfigurationError.kind: 500,
    ValidationError.kind: 400,
    UpstreamError.kind: 502,
}


class TransformSuccessResponse(BaseModel):
    ok: bool = True
    dataUrl: str
    mimeType: str


class TransformFailureResponse(BaseModel):
    ok: bool = False
    error: str


def log_level(name: str | None) -> int:
    level = logging.getLevelName((name or "").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def get_settings() -> Settings:
    return Settings.from_env()


def get_gateway(settings: Settings = Depends(get_settings)) -> TransformationGateway:
    return TransformationGateway(settings)


@asynccontextmanager
async def lifespan(_: FastAPI):
    load_dotenv()
    logging.basicConfig(
        level=log_level(os.getenv("LOG_LEVEL")),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if not os.getenv(API_KEY_ENV):
        logger.warning("%s is not set; transformations will fail until it is configured", API_KEY_ENV)
    yield


app = FastAPI(title="Room Makeover", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
    messages = [str(error.get("msg") or "") for error in exc.errors()]
    reason = "; ".join(message for message in messages if message) or "Invalid request."
    logger.warning("Rejected malformed request: %s", reason)
    return JSONResponse(status_code=400, content=TransformFailureResponse(error=reason).model_dump())


@app.get("/api/options")
async def get_options(settings: Settings = Depends(get_settings)) -> dict[str, Any]:
    return {
        "styles": STYLE_OPTIONS,
        "wallColors": WALL_COLOR_OPTIONS,
        "defaults": {"style": DEFAULT_STYLE, "wallColor": DEFAULT_WALL_COLOR},
        "allowedTypes": sorted(ALLOWED_TYPES),
        "maxBytes": MAX_BYTES,
        "hasKey": settings.has_key,
    }


@app.post(
    "/api/transform",
    response_model=TransformSuccessResponse,
    responses={
        400: {"model": TransformFailureResponse},
        500: {"model": TransformFailureResponse},
        502: {"model": TransformFailureResponse},
    },
)
async def transform_image(
    image: UploadFile | None = File(default=None),
    style: str = Form(DEFAULT_STYLE),
    wall_color: str = Form(DEFAULT_WALL_COLOR, alias="wallColor"),
    gateway: TransformationGateway = Depends(get_gateway),
):
    # reading one byte past the limit is enough for the size check
    content = await image.read(MAX_BYTES + 1) if image is not None else None
    mime_type = image.content_type if image is not None else None

    result = await gateway.transform(content, mime_type, style, wall_color)
    if isinstance(result, TransformFailure):
        return JSONResponse(
            status_code=FAILURE_STATUS.get(result.kind, 502),
            content=TransformFailureResponse(error=result.reason).model_dump(),
        )

    return TransformSuccessResponse(dataUrl=result.data_url, mimeType=result.mime_type)


@app.get("/")
async def root() -> FileResponse:
    return FileResponse(STATIC_DIR / "index.html")


app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")
