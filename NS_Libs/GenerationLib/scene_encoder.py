"""
Scene Parameter Encoder.

Turns the structured generation settings into the instruction text that
travels as the single text part of a generation request. The text is built
in a fixed order:

    editing context -> base prompt -> viewpoints -> time -> season -> style

Both the editing-context and the scene clauses are kept as ordered lists of
(predicate, clause builder) pairs so the order is explicit and testable.
Only settings that are present contribute a clause.
"""

from dataclasses import dataclass
from typing import Callable, List, Tuple

from NS_Libs.constants import (
    CAMERA_ROTATION_CLAUSE,
    CONTEXT_REFERENCE_AFTER_SOURCE,
    CONTEXT_REFERENCE_ONLY,
    CONTEXT_SOURCE_ONLY,
    CONTEXT_SOURCE_WITH_MASK,
    DEFAULT_PROMPT,
    OBJECT_ROTATION_CLAUSE,
    SEASON_CLAUSE,
    STYLE_CLAUSE,
    TIME_CLAUSE,
    VIEWPOINT_SEPARATOR,
)
from NS_Libs.GenerationLib.generation_settings import GenerationSettings, RotationMode


@dataclass(frozen=True)
class EditingContext:
    """Which images accompany the prompt.

    A mask only counts alongside a source image.
    """
    has_source: bool = False
    has_mask: bool = False
    has_reference: bool = False

    @property
    def has_source_mask(self) -> bool:
        return self.has_source and self.has_mask


ContextRule = Tuple[Callable[[EditingContext], bool], str]
SceneRule = Tuple[Callable[[GenerationSettings], bool], Callable[[GenerationSettings], str]]


# The reference clauses say "last provided image" because the request
# assembler always places the reference after the source and mask parts.
CONTEXT_RULES: List[ContextRule] = [
    (lambda c: c.has_source_mask, CONTEXT_SOURCE_WITH_MASK),
    (lambda c: c.has_source and not c.has_mask, CONTEXT_SOURCE_ONLY),
    (lambda c: c.has_reference and c.has_source, CONTEXT_REFERENCE_AFTER_SOURCE),
    (lambda c: c.has_reference and not c.has_source, CONTEXT_REFERENCE_ONLY),
]


def _joined_viewpoints(settings: GenerationSettings) -> str:
    return VIEWPOINT_SEPARATOR.join(v.value for v in settings.viewpoints)


SCENE_RULES: List[SceneRule] = [
    (
        lambda s: bool(s.viewpoints) and s.rotation_mode is RotationMode.OBJECT,
        lambda s: OBJECT_ROTATION_CLAUSE.format(viewpoints=_joined_viewpoints(s)),
    ),
    (
        lambda s: bool(s.viewpoints) and s.rotation_mode is RotationMode.CAMERA,
        lambda s: CAMERA_ROTATION_CLAUSE.format(viewpoints=_joined_viewpoints(s)),
    ),
    (lambda s: s.time_of_day is not None, lambda s: TIME_CLAUSE.format(value=s.time_of_day.value)),
    (lambda s: s.season is not None, lambda s: SEASON_CLAUSE.format(value=s.season.value)),
    (lambda s: s.style is not None, lambda s: STYLE_CLAUSE.format(value=s.style.value)),
]


def encode_editing_context(context: EditingContext) -> str:
    """Render the editing-context instructions, or '' for pure text-to-image."""
    return " ".join(clause for applies, clause in CONTEXT_RULES if applies(context))


def encode_scene(settings: GenerationSettings) -> str:
    """Render the viewpoint, time, season and style clauses, in that order."""
    return "".join(build(settings) for applies, build in SCENE_RULES if applies(settings))


def build_instruction_text(settings: GenerationSettings, context: EditingContext) -> str:
    """
    Build the full instruction text for the request's text part.

    Args:
        settings: The user's generation settings
        context: Which images accompany the prompt

    Returns:
        Editing context, base prompt and scene clauses as one string
    """
    prompt = settings.prompt or DEFAULT_PROMPT

    instructions = encode_editing_context(context)
    if instructions:
        prompt = f"{instructions} {prompt}"

    return prompt + encode_scene(settings)
