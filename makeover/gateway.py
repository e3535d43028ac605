import base64
import logging
from dataclasses import dataclass
from typing import Any, Union

import httpx

from .config import API_KEY_ENV, Settings
from .errors import ConfigurationError, MakeoverError, UpstreamError
from .prompts import build_prompt, normalize_options
from .validation import make_candidate, validate_options, validate_upload

logger = logging.getLogger(__name__)

PROVIDER_NAME = "Gemini"
DEFAULT_OUTPUT_MIME = "image/png"


def to_data_url(image_b64: str, mime_type: str = DEFAULT_OUTPUT_MIME) -> str:
    return f"data:{mime_type};base64,{image_b64}"


@dataclass(frozen=True)
class TransformSuccess:
    image_b64: str
    mime_type: str

    ok = True

    @property
    def image_bytes(self) -> bytes:
        return base64.b64decode(self.image_b64)

    @property
    def data_url(self) -> str:
        return to_data_url(self.image_b64, self.mime_type)


@dataclass(frozen=True)
class TransformFailure:
    reason: str
    kind: str = UpstreamError.kind

    ok = False


TransformResult = Union[TransformSuccess, TransformFailure]


def provider_error(response: httpx.Response) -> UpstreamError:
    try:
        payload = response.json()
    except ValueError:
        return UpstreamError(f"{PROVIDER_NAME} returned an unexpected error ({response.status_code}).")

    error_obj = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error_obj, dict):
        message = str(error_obj.get("message") or "")
        status = str(error_obj.get("status") or "")
        if "safety" in message.lower() or status == "SAFETY":
            return UpstreamError(
                f"{PROVIDER_NAME}: The photo was blocked by the safety filter. Try another image."
            )
        if message:
            return UpstreamError(f"{PROVIDER_NAME}: {message}")

    return UpstreamError(f"{PROVIDER_NAME} error ({response.status_code}). Please try again.")


def extract_inline_image(payload: Any) -> tuple[str, str]:
    """Return ``(base64_data, mime_type)`` of the first inline image part.

    Only the first candidate is inspected; its parts are scanned in order and
    text parts are skipped.
    """
    if not isinstance(payload, dict):
        raise UpstreamError("Unexpected response from the image model.")

    candidates = payload.get("candidates") or []
    first = candidates[0] if candidates else {}
    parts = ((first or {}).get("content") or {}).get("parts") or []
    for part in parts:
        if not isinstance(part, dict):
            continue
        inline_data = part.get("inlineData") or part.get("inline_data")
        if inline_data and inline_data.get("data"):
            mime = inline_data.get("mimeType") or inline_data.get("mime_type") or DEFAULT_OUTPUT_MIME
            return inline_data["data"], mime

    raise UpstreamError("Model did not return an image.")


class TransformationGateway:
    """Sends one room photo plus its prompt to the image model.

    ``transform`` never raises: every problem comes back as a
    ``TransformFailure``. A custom ``transport`` can be passed to run against a
    fake model.
    """

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.settings = settings
        self._transport = transport

    async def transform(
        self,
        image_bytes: bytes | None,
        mime_type: str | None,
        style: str | None,
        wall_color: str | None,
    ) -> TransformResult:
        try:
            image_b64, out_mime = await self._transform(image_bytes, mime_type, style, wall_color)
        except MakeoverError as exc:
            if exc.kind == UpstreamError.kind:
                logger.error("Transformation failed: %s", exc.message)
            else:
                logger.warning("Transformation rejected (%s): %s", exc.kind, exc.message)
            return TransformFailure(reason=exc.message, kind=exc.kind)
        except Exception as exc:
            logger.exception("Unexpected error during transformation")
            return TransformFailure(reason=str(exc) or "Unknown error")

        return TransformSuccess(image_b64=image_b64, mime_type=out_mime)

    async def _transform(
        self,
        image_bytes: bytes | None,
        mime_type: str | None,
        style: str | None,
        wall_color: str | None,
    ) -> tuple[str, str]:
        api_key = self.settings.api_key
        if not api_key:
            raise ConfigurationError(f"Missing {API_KEY_ENV} env var.")

        candidate = make_candidate(image_bytes, mime_type)
        options = normalize_options(style, wall_color)
        rejection = validate_upload(candidate) or validate_options(options.style, options.wall_color)
        if rejection is not None:
            raise rejection

        prompt = build_prompt(options.style, options.wall_color)
        parts: list[dict[str, Any]] = [
            {
                "inlineData": {
                    "mimeType": candidate.mime_type,
                    "data": base64.b64encode(candidate.data).decode("utf-8"),
                }
            },
            {"text": prompt},
        ]

        logger.info(
            "Requesting %s makeover from %s (wall color %s, %d bytes)",
            options.style,
            self.settings.model,
            options.wall_color,
            candidate.byte_length,
        )

        try:
            async with httpx.AsyncClient(timeout=self.settings.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.settings.endpoint,
                    params={"key": api_key},
                    headers={"Content-Type": "application/json"},
                    json={
                        "contents": [{"parts": parts}],
                        "generationConfig": {
                            "responseModalities": ["IMAGE", "TEXT"],
                        },
                    },
                )
        except httpx.HTTPError as exc:
            raise UpstreamError(str(exc) or f"Could not reach {PROVIDER_NAME}.") from exc

        if response.status_code >= 400:
            raise provider_error(response)

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamError(f"{PROVIDER_NAME} returned a response that is not JSON.") from exc

        return extract_inline_image(payload)
