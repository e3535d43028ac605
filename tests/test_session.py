import asyncio

import pytest

from makeover.gateway import TransformFailure, TransformSuccess
from makeover.session import NO_FILE_ERROR, CompareMode, Comparator, FormSession, Phase
from makeover.validation import MAX_BYTES, UploadCandidate

ROOM = UploadCandidate(data=b"\xff\xd8room", mime_type="image/jpeg")
RESULT = TransformSuccess(image_b64="cmVub3ZhdGVk", mime_type="image/png")


def resolved(value):
    async def send(candidate, options):
        return value

    return send


def test_submit_without_file_fails_locally():
    session = FormSession()
    calls = []

    async def send(candidate, options):
        calls.append(options)
        return RESULT

    assert asyncio.run(session.submit(send)) is Phase.FAILED
    assert session.error == NO_FILE_ERROR
    assert calls == []


def test_local_validation_blocks_bad_type():
    session = FormSession()
    session.select_file(UploadCandidate(data=b"GIF89a", mime_type="image/gif"))

    assert session.begin_submit() is None
    assert session.phase is Phase.FAILED
    assert "image/gif" in session.error


def test_local_validation_blocks_oversized_file():
    session = FormSession()
    session.select_file(UploadCandidate(data=b"\x00" * (MAX_BYTES + 1), mime_type="image/png"))

    session.begin_submit()

    assert session.error == "Image too large (max 10MB)."


def test_success_stores_result_and_resets_comparator():
    session = FormSession()
    session.select_file(ROOM)
    session.comparator.set_percent(10)
    session.style = "industrial"
    session.wall_color = "#FFFFFF"
    seen = []

    async def send(candidate, options):
        seen.append((candidate, options))
        return RESULT

    assert asyncio.run(session.submit(send)) is Phase.RESOLVED
    assert session.result == RESULT
    assert session.error is None
    assert session.comparator.reveal_percent == 50
    assert seen[0][0] is ROOM
    assert (seen[0][1].style, seen[0][1].wall_color) == ("industrial", "#FFFFFF")


def test_submit_is_disabled_while_awaiting_model():
    session = FormSession()
    session.select_file(ROOM)

    assert session.begin_submit() is not None
    assert session.phase is Phase.AWAITING_MODEL
    assert not session.submit_enabled

    assert session.begin_submit() is None
    assert session.phase is Phase.AWAITING_MODEL

    session.finish(RESULT)
    assert session.submit_enabled


def test_failure_keeps_earlier_result():
    session = FormSession()
    session.select_file(ROOM)
    asyncio.run(session.submit(resolved(RESULT)))

    asyncio.run(session.submit(resolved(TransformFailure(reason="Model did not return an image."))))

    assert session.phase is Phase.FAILED
    assert session.error == "Model did not return an image."
    assert session.result == RESULT


def test_form_is_usable_again_after_failure():
    session = FormSession()
    session.select_file(ROOM)
    asyncio.run(session.submit(resolved(TransformFailure(reason="boom"))))

    assert session.submit_enabled
    assert asyncio.run(session.submit(resolved(RESULT))) is Phase.RESOLVED
    assert session.error is None


def test_selecting_new_file_clears_previous_result_and_error():
    session = FormSession()
    session.select_file(ROOM)
    asyncio.run(session.submit(resolved(RESULT)))
    session.error = "stale"

    session.select_file(UploadCandidate(data=b"\x89PNG", mime_type="image/png"))

    assert session.result is None
    assert session.error is None
    assert session.phase is Phase.IDLE


def test_reset_restores_defaults():
    session = FormSession(style="boho", wall_color="#B3E5FC")
    session.select_file(ROOM)
    session.comparator.set_mode("blend")
    asyncio.run(session.submit(resolved(RESULT)))

    session.reset()

    assert session.file is None
    assert session.result is None
    assert (session.style, session.wall_color) == ("modern", "no-change")
    assert session.comparator.mode is CompareMode.SPLIT


@pytest.mark.parametrize(
    "style, color, expected",
    [
        ("modern", "no-change", "visualization-modern-no-change.png"),
        ("mid-century modern", "#F8BBD0", "visualization-mid-century-modern-F8BBD0.png"),
    ],
)
def test_download_filename(style, color, expected):
    assert FormSession(style=style, wall_color=color).download_filename == expected


@pytest.mark.parametrize(
    "pointer_x, expected",
    [(-500, 0), (100, 0), (150, 25), (300, 100), (900, 100)],
)
def test_drag_is_clamped_to_container(pointer_x, expected):
    comparator = Comparator()
    assert comparator.drag(pointer_x, left=100, width=200) == expected
    assert 0 <= comparator.reveal_percent <= 100


def test_drag_on_zero_width_container_is_ignored():
    comparator = Comparator(reveal_percent=30)
    assert comparator.drag(50, left=0, width=0) == 30


@pytest.mark.parametrize("value, expected", [(-1, 0), (0, 0), (42.5, 42.5), (100, 100), (250, 100)])
def test_percent_can_be_set_directly(value, expected):
    assert Comparator().set_percent(value) == expected


def test_blend_mode_is_selectable():
    comparator = Comparator()
    comparator.set_mode("blend")
    assert comparator.mode is CompareMode.BLEND
    with pytest.raises(ValueError):
        comparator.set_mode("diagonal")


def test_file_cannot_change_while_awaiting_model():
    session = FormSession()
    session.select_file(ROOM)
    session.begin_submit()
    other = UploadCandidate(data=b"\x89PNG", mime_type="image/png")

    session.select_file(other)

    assert session.file is ROOM
    assert session.phase is Phase.AWAITING_MODEL
    assert session.begin_submit() is None

    session.finish(RESULT)
    assert session.file is ROOM
    assert session.result == RESULT


def test_reset_is_ignored_while_awaiting_model():
    session = FormSession(style="boho")
    session.select_file(ROOM)
    session.begin_submit()

    session.reset()

    assert session.file is ROOM
    assert session.style == "boho"
    assert session.phase is Phase.AWAITING_MODEL


def test_send_that_raises_leaves_form_usable():
    session = FormSession()
    session.select_file(ROOM)

    async def send(candidate, options):
        raise RuntimeError("network down")

    assert asyncio.run(session.submit(send)) is Phase.FAILED
    assert session.error == "network down"
    assert session.submit_enabled
    assert asyncio.run(session.submit(resolved(RESULT))) is Phase.RESOLVED
