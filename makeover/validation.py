import re
from dataclasses import dataclass

from .errors import ValidationError
from .prompts import NO_CHANGE, STYLES

ALLOWED_TYPES = frozenset({"image/png", "image/jpeg", "image/webp"})
MAX_BYTES = 10 * 1024 * 1024  # 10MB
UNKNOWN_MIME_TYPE = "application/octet-stream"

HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


@dataclass(frozen=True)
class UploadCandidate:
    data: bytes
    mime_type: str

    @property
    def byte_length(self) -> int:
        return len(self.data)


def make_candidate(data: bytes | None, mime_type: str | None) -> UploadCandidate | None:
    """Wrap raw upload bytes; an absent or empty upload counts as no file."""
    if not data:
        return None
    return UploadCandidate(data=data, mime_type=(mime_type or "").strip() or UNKNOWN_MIME_TYPE)


def validate_upload(candidate: UploadCandidate | None) -> ValidationError | None:
    if candidate is None:
        return ValidationError("No image uploaded.")
    if candidate.mime_type not in ALLOWED_TYPES:
        return ValidationError(f"Unsupported file type: {candidate.mime_type}")
    if candidate.byte_length > MAX_BYTES:
        return ValidationError("Image too large (max 10MB).")
    return None


def validate_options(style: str, wall_color: str) -> ValidationError | None:
    if style not in STYLES:
        return ValidationError(f"Unsupported style: {style}")
    if wall_color != NO_CHANGE and not HEX_COLOR.match(wall_color):
        return ValidationError(f"Unsupported wall color: {wall_color}")
    return None
