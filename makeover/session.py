"""View model for the upload form and the before/after comparator.

The browser client in ``static/app.js`` follows the same rules; this module
keeps them in one place where they can be exercised without a browser.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable

from .gateway import TransformFailure, TransformResult, TransformSuccess
from .prompts import DEFAULT_STYLE, DEFAULT_WALL_COLOR, TransformOptions, normalize_options
from .validation import UploadCandidate, validate_upload

DEFAULT_REVEAL_PERCENT = 50.0
NO_FILE_ERROR = "Please choose an image (PNG/JPEG/WEBP, up to 10MB)."


class Phase(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    AWAITING_MODEL = "awaiting_model"
    RESOLVED = "resolved"
    FAILED = "failed"


class CompareMode(str, Enum):
    SPLIT = "split"
    BLEND = "blend"


def clamp_percent(value: float) -> float:
    return max(0.0, min(100.0, float(value)))


@dataclass
class Comparator:
    """Reveal state of the generated image over the original.

    In ``split`` mode the percent is the horizontal position of the divider; in
    ``blend`` mode it is the opacity of the generated image.
    """

    reveal_percent: float = DEFAULT_REVEAL_PERCENT
    mode: CompareMode = CompareMode.SPLIT

    def set_percent(self, value: float) -> float:
        self.reveal_percent = clamp_percent(value)
        return self.reveal_percent

    def drag(self, pointer_x: float, left: float, width: float) -> float:
        # zero-width container: nothing rendered yet
        if width <= 0:
            return self.reveal_percent
        return self.set_percent((pointer_x - left) / width * 100.0)

    def set_mode(self, mode: CompareMode | str) -> None:
        self.mode = CompareMode(mode)

    def reset(self) -> None:
        self.reveal_percent = DEFAULT_REVEAL_PERCENT


@dataclass
class FormSession:
    file: UploadCandidate | None = None
    style: str = DEFAULT_STYLE
    wall_color: str = DEFAULT_WALL_COLOR
    result: TransformSuccess | None = None
    error: str | None = None
    phase: Phase = Phase.IDLE
    comparator: Comparator = field(default_factory=Comparator)

    @property
    def submit_enabled(self) -> bool:
        return self.phase is not Phase.AWAITING_MODEL

    @property
    def download_filename(self) -> str:
        style = self.style.replace(" ", "-")
        color = self.wall_color.replace("#", "")
        return f"visualization-{style}-{color}.png"

    def select_file(self, candidate: UploadCandidate | None) -> None:
        # the file input is locked while a request is in flight
        if self.phase is Phase.AWAITING_MODEL:
            return
        self.file = candidate
        self.result = None
        self.error = None
        self.phase = Phase.IDLE
        self.comparator.reset()

    def begin_submit(self) -> TransformOptions | None:
        """Run the local checks and move to ``AWAITING_MODEL``.

        Returns the options to send, or ``None`` when nothing should be sent:
        either a request is already in flight or the local checks failed.
        """
        if not self.submit_enabled:
            return None

        self.error = None
        if self.file is None:
            return self._fail(NO_FILE_ERROR)

        self.phase = Phase.VALIDATING
        rejection = validate_upload(self.file)
        if rejection is not None:
            return self._fail(rejection.message)

        self.phase = Phase.AWAITING_MODEL
        return normalize_options(self.style, self.wall_color)

    def finish(self, result: TransformResult) -> None:
        if isinstance(result, TransformFailure):
            self._fail(result.reason)
            return
        self.result = result
        self.error = None
        self.phase = Phase.RESOLVED
        self.comparator.reset()

    async def submit(
        self,
        send: Callable[[UploadCandidate, TransformOptions], Awaitable[TransformResult]],
    ) -> Phase:
        options = self.begin_submit()
        if options is None or self.file is None:
            return self.phase
        try:
            result = await send(self.file, options)
        except Exception as exc:
            result = TransformFailure(reason=str(exc) or "Unknown error")
        self.finish(result)
        return self.phase

    def reset(self) -> None:
        if self.phase is Phase.AWAITING_MODEL:
            return
        self.select_file(None)
        self.style = DEFAULT_STYLE
        self.wall_color = DEFAULT_WALL_COLOR
        self.comparator.set_mode(CompareMode.SPLIT)

    def _fail(self, reason: str) -> None:
        self.error = reason
        self.phase = Phase.FAILED
        return None
