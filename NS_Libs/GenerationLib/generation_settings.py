"""
Generation settings model for Nano Studio.

Classes:
    ImageSize, AspectRatio: Output size tier and frame shape
    Viewpoint, RotationMode: Orientation selections and how to read them
    TimeOfDay, Season, ArtStyle: Optional scene parameters
    GenerationSettings: Everything the user chose for one generation
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Type, TypeVar


class ImageSize(str, Enum):
    SIZE_1K = "1K"
    SIZE_2K = "2K"
    SIZE_4K = "4K"


class AspectRatio(str, Enum):
    SQUARE = "1:1"
    PORTRAIT = "3:4"
    LANDSCAPE = "4:3"
    MOBILE = "9:16"
    WIDE = "16:9"
    CINEMA = "21:9"


class Viewpoint(str, Enum):
    FRONT = "Front View"
    BACK = "Back View"
    LEFT = "Left Side View"
    RIGHT = "Right Side View"
    TOP = "Top-Down View (Bird's Eye)"
    BOTTOM = "Bottom-Up View (Worm's Eye)"
    DUTCH = "Dutch Angle"
    ISOMETRIC = "Isometric View"


class RotationMode(str, Enum):
    """Whether viewpoints place the camera or turn the subject."""
    CAMERA = "camera"
    OBJECT = "object"


class TimeOfDay(str, Enum):
    DAWN = "Dawn"
    MORNING = "Morning"
    NOON = "Noon"
    GOLDEN_HOUR = "Golden Hour"
    DUSK = "Dusk"
    NIGHT = "Night"
    MIDNIGHT = "Midnight"


class Season(str, Enum):
    SPRING = "Spring"
    SUMMER = "Summer"
    AUTUMN = "Autumn"
    WINTER = "Winter"


class ArtStyle(str, Enum):
    PHOTOREALISTIC = "Photorealistic"
    CINEMATIC = "Cinematic"
    ANIME = "Anime"
    DIGITAL_ART = "Digital Art"
    OIL_PAINTING = "Oil Painting"
    CYBERPUNK = "Cyberpunk"
    MINIMALIST = "Minimalist"
    VINTAGE = "Vintage"


E = TypeVar("E", bound=Enum)


def _optional_enum(enum_cls: Type[E], value: Any) -> Optional[E]:
    if value is None or value == "":
        return None
    return enum_cls(value)


@dataclass
class GenerationSettings:
    """User settings for one generation.

    Attributes:
        prompt: Free-form description (may be empty)
        image_size: Output size tier
        aspect_ratio: Output frame shape
        viewpoints: Selected viewpoints, in selection order
        rotation_mode: How the viewpoints are to be read
        time_of_day: Optional lighting time (None = backend chooses)
        season: Optional season (None = backend chooses)
        style: Optional art style (None = backend chooses)
    """
    prompt: str = ""
    image_size: ImageSize = ImageSize.SIZE_1K
    aspect_ratio: AspectRatio = AspectRatio.SQUARE
    viewpoints: List[Viewpoint] = field(default_factory=list)
    rotation_mode: RotationMode = RotationMode.CAMERA
    time_of_day: Optional[TimeOfDay] = None
    season: Optional[Season] = None
    style: Optional[ArtStyle] = None

    def toggle_viewpoint(self, viewpoint: Viewpoint) -> bool:
        """
        Select a viewpoint (appended last) or deselect it if already selected.

        Returns:
            True if the viewpoint is selected afterwards
        """
        viewpoint = Viewpoint(viewpoint)
        if viewpoint in self.viewpoints:
            self.viewpoints.remove(viewpoint)
            return False
        self.viewpoints.append(viewpoint)
        return True

    def toggle_style(self, style: ArtStyle) -> None:
        style = ArtStyle(style)
        self.style = None if self.style is style else style

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "prompt": self.prompt,
            "image_size": self.image_size.value,
            "aspect_ratio": self.aspect_ratio.value,
            "viewpoints": [v.value for v in self.viewpoints],
            "rotation_mode": self.rotation_mode.value,
            "time_of_day": self.time_of_day.value if self.time_of_day else None,
            "season": self.season.value if self.season else None,
            "style": self.style.value if self.style else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GenerationSettings":
        """
        Create from a dictionary. Unknown keys are ignored.

        Raises:
            ValueError: If a value is not a member of its enumeration
        """
        defaults = cls()
        return cls(
            prompt=str(data.get("prompt") or ""),
            image_size=ImageSize(data.get("image_size", defaults.image_size)),
            aspect_ratio=AspectRatio(data.get("aspect_ratio", defaults.aspect_ratio)),
            viewpoints=[Viewpoint(v) for v in data.get("viewpoints", [])],
            rotation_mode=RotationMode(data.get("rotation_mode", defaults.rotation_mode)),
            time_of_day=_optional_enum(TimeOfDay, data.get("time_of_day")),
            season=_optional_enum(Season, data.get("season")),
            style=_optional_enum(ArtStyle, data.get("style")),
        )
