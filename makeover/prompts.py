from dataclasses import dataclass

NO_CHANGE = "no-change"
DEFAULT_STYLE = "modern"
DEFAULT_WALL_COLOR = NO_CHANGE

STYLE_OPTIONS: list[dict[str, str]] = [
    {"value": "modern", "label": "Modern"},
    {"value": "scandinavian", "label": "Scandinavian"},
    {"value": "minimalist", "label": "Minimalist"},
    {"value": "industrial", "label": "Industrial"},
    {"value": "boho", "label": "Boho"},
    {"value": "japandi", "label": "Japandi"},
    {"value": "rustic", "label": "Rustic"},
    {"value": "mid-century modern", "label": "Mid-Century Modern"},
    {"value": "contemporary", "label": "Contemporary"},
]

WALL_COLOR_OPTIONS: list[dict[str, str]] = [
    {"value": NO_CHANGE, "label": "Keep current"},
    {"value": "#F8BBD0", "label": "Pink"},
    {"value": "#B3E5FC", "label": "Blue"},
    {"value": "#C8E6C9", "label": "Green"},
    {"value": "#FFF9C4", "label": "Yellow"},
    {"value": "#E1BEE7", "label": "Purple"},
    {"value": "#FFCCBC", "label": "Orange"},
    {"value": "#D7CCC8", "label": "Brown"},
    {"value": "#CFD8DC", "label": "Gray"},
    {"value": "#FFFFFF", "label": "White"},
]

STYLES: frozenset[str] = frozenset(option["value"] for option in STYLE_OPTIONS)

PRESERVE_STRUCTURE = (
    "Keep all main construction elements - doors, windows, walls, ceiling height, "
    "and overall layout - in the exact same place. Do not move or resize any of them. "
    "Never replace windows. Never remove staircases."
)

RENOVATE_SURFACES = (
    "Replace old or damaged surfaces, including walls, floors and ceilings, with clean, "
    "renovated materials in line with the chosen style. Replace old furniture and "
    "ceiling lamps with pieces that match the {style} style."
)

PHOTOREALISM = (
    "Use realistic textures, natural lighting, and high-quality interior design details "
    "to show a professional, photorealistic result."
)

FORBIDDEN_CONTENT = (
    "Do not include any text or watermarks on the photograph. Do not add people or "
    "clutter, and do not distort the perspective."
)


@dataclass(frozen=True)
class TransformOptions:
    style: str = DEFAULT_STYLE
    wall_color: str = DEFAULT_WALL_COLOR


def normalize_options(style: str | None, wall_color: str | None) -> TransformOptions:
    """Trim user input and substitute defaults for blank values.

    Hex colors are upper-cased so the same color always yields the same prompt.
    """
    style_value = (style or "").strip() or DEFAULT_STYLE
    color_value = (wall_color or "").strip() or DEFAULT_WALL_COLOR
    if color_value.startswith("#"):
        color_value = color_value.upper()
    return TransformOptions(style=style_value, wall_color=color_value)


def wall_color_instruction(wall_color: str) -> str:
    if wall_color == NO_CHANGE:
        return ""
    return f"Paint the walls in {wall_color} color."


def build_prompt(style: str, wall_color: str) -> str:
    """Render the instruction sent alongside the room photo.

    Pure function of its inputs: the same style and wall color always produce
    the same string.
    """
    sentences = [
        "Transform this photo of an interior into a visualization of how it would look "
        f"after a full reconstruction in a {style} style.",
        PRESERVE_STRUCTURE,
        wall_color_instruction(wall_color),
        RENOVATE_SURFACES.format(style=style),
        PHOTOREALISM,
        FORBIDDEN_CONTENT,
    ]
    return " ".join(sentence for sentence in sentences if sentence)
