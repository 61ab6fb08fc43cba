"""
Typed content elements living inside a block.

Element content is a plain JSON-compatible mapping keyed by element type.
Text markup is opaque: it is stored and returned as-is, never parsed.
"""
import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from .ids import new_element_id


class ElementType(str, Enum):
    TEXT = "text"
    BUTTON = "button"
    IMAGE = "image"
    VIDEO = "video"
    DIVIDER = "divider"
    SPACER = "spacer"
    PRICING = "pricing"


HEADING_HTML = '<h1 style="text-align: center"></h1>'
PARAGRAPH_HTML = "<p></p>"
PARAGRAPH_HINT = "paragraph"

DEFAULT_BUTTON_TEXT = "Click me"
DEFAULT_CURRENCY = "USD"

# Content fields carried over by style copy/paste.
STYLE_FIELDS = ("buttonColor",)


@dataclass(frozen=True)
class Element:
    id: str
    type: ElementType
    order: int
    content: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "content": copy.deepcopy(self.content),
            "display_order": self.order,
        }


def default_content(element_type: ElementType, style_hint: Optional[str] = None) -> Dict[str, Any]:
    if element_type is ElementType.TEXT:
        if style_hint == PARAGRAPH_HINT:
            return {"html": PARAGRAPH_HTML}
        return {"html": HEADING_HTML}

    if element_type is ElementType.BUTTON:
        return {"buttonText": DEFAULT_BUTTON_TEXT, "buttonUrl": ""}

    if element_type is ElementType.IMAGE:
        return {"imageUrl": "", "imageAlt": ""}

    if element_type is ElementType.VIDEO:
        return {"videoUrl": ""}

    if element_type is ElementType.PRICING:
        return {
            "lineItems": [],
            "discount": {"type": "none", "value": 0},
            "currency": DEFAULT_CURRENCY,
        }

    # divider, spacer
    return {}


def new_element(
    element_type: ElementType,
    order: int = 0,
    style_hint: Optional[str] = None,
) -> Element:
    return Element(
        id=new_element_id(),
        type=element_type,
        order=order,
        content=default_content(element_type, style_hint),
    )


def parse_element_type(value) -> Optional[ElementType]:
    """Return the ElementType for a raw value, or None if it is unknown."""
    if isinstance(value, ElementType):
        return value
    try:
        return ElementType(value)
    except ValueError:
        return None
