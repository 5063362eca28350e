import math
import random
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Optional, Tuple

from . import config
from .errors import MalformedStateError

RGB = Tuple[int, int, int]


def clamp_color(r, g, b) -> RGB:
    """Clamps each channel to [0, 255]; NaN channels become 255."""
    channels = []
    for value in (r, g, b):
        value = float(value)
        if math.isnan(value):
            value = 255
        channels.append(int(min(max(0, value), 255)))
    return tuple(channels)


def parse_color(color_string: str) -> RGB:
    """Parses an "r,g,b" string into a clamped RGB triple.

    Raises ValueError if the string does not hold three numbers.
    """
    parts = [part.strip() for part in str(color_string).split(',')]
    if len(parts) != 3:
        raise ValueError(f"Expected 'r,g,b', got {color_string!r}")
    return clamp_color(*(float(part) for part in parts))


def format_color(rgb: RGB) -> str:
    return ",".join(str(int(c)) for c in rgb)


def text_color_for(rgb: RGB) -> str:
    """Black text on light notes, white text on dark ones."""
    if sum(rgb) > config.LIGHT_TEXT_THRESHOLD:
        return config.DARK_TEXT_COLOR
    return config.LIGHT_TEXT_COLOR


def _number(data: Dict[str, Any], key: str, default: float) -> float:
    value = data.get(key, default)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise MalformedStateError(f"Field '{key}' is not a number: {value!r}")
    try:
        number = float(value)
    except (ValueError, OverflowError) as e:
        raise MalformedStateError(f"Field '{key}' is not a number: {value!r}") from e
    # NaN is tolerated (callers replace it), infinities are not
    if math.isinf(number):
        raise MalformedStateError(f"Field '{key}' is not finite: {value!r}")
    return number


@dataclass(frozen=True)
class NoteState:
    """Everything stored in a note's <id>_state record."""
    x: float
    y: float
    color: RGB = config.DEFAULT_NOTE_COLOR
    width: float = config.DEFAULT_NOTE_WIDTH
    height: float = config.DEFAULT_NOTE_HEIGHT
    font_size: int = config.DEFAULT_FONT_SIZE
    entry_visible: bool = True
    is_bold: bool = False

    @property
    def text_color(self) -> str:
        return text_color_for(self.color)

    def with_changes(self, **changes) -> "NoteState":
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            config.STATE_KEY_X: self.x,
            config.STATE_KEY_Y: self.y,
            config.STATE_KEY_COLOR: format_color(self.color),
            config.STATE_KEY_WIDTH: self.width,
            config.STATE_KEY_HEIGHT: self.height,
            config.STATE_KEY_FONT_SIZE: self.font_size,
            config.STATE_KEY_ENTRY_VISIBLE: self.entry_visible,
            config.STATE_KEY_IS_BOLD: self.is_bold,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "NoteState":
        """Builds a state from a decoded record.

        Missing size/font fields fall back to defaults and a missing position
        is left as NaN for Bounds.sanitize to re-randomise. Raises
        MalformedStateError for anything that is not a usable record.
        """
        if not isinstance(data, dict):
            raise MalformedStateError(f"State record is not an object: {type(data).__name__}")

        color_value = data.get(config.STATE_KEY_COLOR)
        if color_value:
            try:
                color = parse_color(color_value)
            except ValueError as e:
                raise MalformedStateError(str(e)) from e
        else:
            color = config.DEFAULT_NOTE_COLOR

        width = _number(data, config.STATE_KEY_WIDTH, config.DEFAULT_NOTE_WIDTH)
        height = _number(data, config.STATE_KEY_HEIGHT, config.DEFAULT_NOTE_HEIGHT)
        font_size = _number(data, config.STATE_KEY_FONT_SIZE, config.DEFAULT_FONT_SIZE)
        if math.isnan(font_size):
            font_size = config.FALLBACK_FONT_SIZE
        elif font_size <= 0:
            font_size = config.DEFAULT_FONT_SIZE

        return cls(
            x=_number(data, config.STATE_KEY_X, math.nan),
            y=_number(data, config.STATE_KEY_Y, math.nan),
            color=color,
            width=width or config.DEFAULT_NOTE_WIDTH,
            height=height or config.DEFAULT_NOTE_HEIGHT,
            font_size=int(font_size),
            entry_visible=data.get(config.STATE_KEY_ENTRY_VISIBLE) is not False,
            is_bold=data.get(config.STATE_KEY_IS_BOLD) is True,
        )


@dataclass(frozen=True)
class Bounds:
    """The visible working area notes are kept inside."""
    width: float
    height: float

    def random_position(self, rng: Optional[random.Random] = None) -> Tuple[float, float]:
        rng = rng or random
        x = rng.random() * max(0, self.width - config.PLACEMENT_MARGIN_X)
        y = rng.random() * max(0, self.height - config.PLACEMENT_MARGIN_Y)
        return x, y

    def is_off_screen(self, x: float, y: float) -> bool:
        return x < 0 or x > self.width - 20 or y < 0 or y > self.height - 20

    def clamp_size(self, width: float, height: float) -> Tuple[float, float]:
        if not math.isfinite(width) or not width:
            width = config.DEFAULT_NOTE_WIDTH
        if not math.isfinite(height) or not height:
            height = config.DEFAULT_NOTE_HEIGHT
        return max(width, config.MIN_NOTE_WIDTH), max(height, config.MIN_NOTE_HEIGHT)

    def clamp_position(self, x: float, y: float, width: float, height: float) -> Tuple[float, float]:
        x = max(0, min(x, self.width - width))
        y = max(0, min(y, self.height - height))
        return x, y

    def sanitize(self, state: NoteState,
                 position_source: Callable[[], Tuple[float, float]]) -> NoteState:
        """Returns a copy of state with valid size, font size and position.

        Non-finite coordinates are replaced by a fresh position from position_source,
        everything else is clamped into the working area.
        """
        width, height = self.clamp_size(state.width, state.height)
        x, y = state.x, state.y
        if not (math.isfinite(x) and math.isfinite(y)):
            x, y = position_source()
        x, y = self.clamp_position(x, y, width, height)

        font_size = state.font_size
        if isinstance(font_size, float) and not math.isfinite(font_size):
            font_size = config.FALLBACK_FONT_SIZE

        return state.with_changes(x=x, y=y, width=width, height=height, font_size=int(font_size))
