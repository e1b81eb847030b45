"""Creative-direction canvas elements.

Elements are a tagged variant on ``type``. Only notes exist today; the
pipeline only ever consumes the concatenated text of the notes.
"""

import uuid
from typing import Any, Literal

from pydantic import BaseModel, Field


class NoteElement(BaseModel):
    """A free-text sticky note placed on the canvas."""

    type: Literal["note"] = "note"
    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:12])
    content: str = ""
    x: float = 0
    y: float = 0
    width: float = 200
    height: float = 150


StoryboardElement = NoteElement

ELEMENT_TYPES: dict[str, type[BaseModel]] = {
    "note": NoteElement,
}


def parse_element(data: dict[str, Any]) -> StoryboardElement:
    """Build the element class matching ``data["type"]``."""
    kind = data.get("type", "note")
    try:
        element_cls = ELEMENT_TYPES[kind]
    except KeyError:
        raise ValueError(f"Unknown storyboard element type: {kind!r}") from None
    return element_cls.model_validate(data)


def collect_instructions(elements: list[StoryboardElement]) -> str:
    """Join the text of every note, in canvas order, with single spaces."""
    return " ".join(el.content for el in elements if el.type == "note")
