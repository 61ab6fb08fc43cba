from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .elements import Element, ElementType, new_element
from .ids import BlockId, PendingId, new_pending_id

DEFAULT_BACKGROUND_COLOR = "#FFFFFF"
DEFAULT_SECTION_TYPE = "text"


@dataclass(frozen=True)
class BlockContent:
    background_color: str
    elements: Tuple[Element, ...] = ()
    # Unrecognised keys from stored content, written back untouched.
    extras: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extras)
        data["background_color"] = self.background_color
        data["elements"] = [element.to_dict() for element in self.elements]
        return data


@dataclass(frozen=True)
class Block:
    """
    A proposal section.

    background_color is kept both here and on content; the two copies must
    always agree (see set_block_color).
    """
    id: BlockId
    order: int
    background_color: str
    content: BlockContent
    visible: bool = True
    section_type: str = DEFAULT_SECTION_TYPE
    title: Optional[str] = None

    @property
    def elements(self) -> Tuple[Element, ...]:
        return self.content.elements

    @property
    def is_pending(self) -> bool:
        return isinstance(self.id, PendingId)

    def find_element(self, element_id: str) -> Optional[Element]:
        for element in self.content.elements:
            if element.id == element_id:
                return element
        return None

    def element_index(self, element_id: str) -> int:
        for index, element in enumerate(self.content.elements):
            if element.id == element_id:
                return index
        return -1


def new_block(order: int = 0) -> Block:
    """Fresh block: white background, one empty centered heading."""
    return Block(
        id=new_pending_id(),
        order=order,
        background_color=DEFAULT_BACKGROUND_COLOR,
        content=BlockContent(
            background_color=DEFAULT_BACKGROUND_COLOR,
            elements=(new_element(ElementType.TEXT, order=0),),
        ),
        visible=True,
    )
