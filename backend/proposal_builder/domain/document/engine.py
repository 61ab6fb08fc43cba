"""
Mutation algebra for a proposal's content tree.

Every operation takes the current value and returns a new one; inputs are
never mutated. Operations are total: an unknown block or element id makes
the call a no-op that returns its input unchanged. Block and element order
values are renumbered 0..N-1 after every structural change.
"""
import copy
import logging
from dataclasses import replace
from typing import Any, Dict, List, Mapping, Optional, Sequence

from proposal_builder.utils.order import compact_order

from .blocks import Block, new_block
from .elements import STYLE_FIELDS, Element, ElementType, new_element
from .ids import new_element_id, new_pending_id, same_id

logger = logging.getLogger(__name__)

UP = "up"
DOWN = "down"


def _find_index(blocks: Sequence[Block], block_id) -> int:
    for index, block in enumerate(blocks):
        if same_id(block.id, block_id):
            return index
    return -1


def _is_index(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _insert_position(length: int, after_index: Optional[int]) -> int:
    # Anything that is not an in-range index appends
    if not _is_index(after_index) or after_index < -1 or after_index >= length:
        return length
    return after_index + 1


def _with_elements(block: Block, elements: Sequence[Element]) -> Block:
    content = replace(block.content, elements=tuple(compact_order(elements)))
    return replace(block, content=content)


# -------------------------------------------------
# Blocks
# -------------------------------------------------

def add_block(blocks: Sequence[Block], after_index: Optional[int] = None) -> List[Block]:
    result = list(blocks)
    result.insert(_insert_position(len(result), after_index), new_block())
    return compact_order(result)


def move_block(blocks: Sequence[Block], block_id, direction: str) -> List[Block]:
    index = _find_index(blocks, block_id)
    if index == -1:
        logger.debug("move_block: unknown block %s", block_id)
        return list(blocks)

    if direction == UP:
        target = index - 1
    elif direction == DOWN:
        target = index + 1
    else:
        logger.debug("move_block: unknown direction %r", direction)
        return list(blocks)

    if target < 0 or target >= len(blocks):
        return list(blocks)

    result = list(blocks)
    result[index], result[target] = result[target], result[index]
    return compact_order(result)


def clone_block(block: Block) -> Block:
    """Deep copy of a block with a fresh pending id and fresh element ids."""
    elements = tuple(
        Element(
            id=new_element_id(),
            type=element.type,
            order=element.order,
            content=copy.deepcopy(element.content),
        )
        for element in block.elements
    )
    content = replace(
        block.content,
        elements=elements,
        extras=copy.deepcopy(block.content.extras),
    )
    return replace(block, id=new_pending_id(), content=content)


def duplicate_block(blocks: Sequence[Block], block_id) -> List[Block]:
    index = _find_index(blocks, block_id)
    if index == -1:
        logger.debug("duplicate_block: unknown block %s", block_id)
        return list(blocks)

    result = list(blocks)
    result.insert(index + 1, clone_block(blocks[index]))
    return compact_order(result)


def delete_block(blocks: Sequence[Block], block_id) -> List[Block]:
    index = _find_index(blocks, block_id)
    if index == -1:
        logger.debug("delete_block: unknown block %s", block_id)
        return list(blocks)

    result = list(blocks)
    del result[index]
    return compact_order(result)


def set_block_color(blocks: Sequence[Block], block_id, color: str) -> List[Block]:
    index = _find_index(blocks, block_id)
    if index == -1:
        return list(blocks)

    block = blocks[index]
    result = list(blocks)
    result[index] = replace(
        block,
        background_color=color,
        content=replace(block.content, background_color=color),
    )
    return result


def set_block_visibility(blocks: Sequence[Block], block_id, visible: bool) -> List[Block]:
    index = _find_index(blocks, block_id)
    if index == -1:
        return list(blocks)

    result = list(blocks)
    result[index] = replace(blocks[index], visible=bool(visible))
    return result


# -------------------------------------------------
# Elements
# -------------------------------------------------

def add_element(
    block: Block,
    element_type: ElementType,
    after_index: Optional[int] = None,
    style_hint: Optional[str] = None,
) -> Block:
    elements = list(block.elements)
    elements.insert(
        _insert_position(len(elements), after_index),
        new_element(ElementType(element_type), style_hint=style_hint),
    )
    return _with_elements(block, elements)


def insert_element(block: Block, element: Element, at_index: Optional[int] = None) -> Block:
    """Place an existing element at at_index (or append); its id is kept."""
    elements = list(block.elements)
    if not _is_index(at_index) or at_index < 0 or at_index > len(elements):
        at_index = len(elements)
    elements.insert(at_index, element)
    return _with_elements(block, elements)


def update_element(block: Block, element_id: str, new_content: Mapping[str, Any]) -> Block:
    index = block.element_index(element_id)
    if index == -1:
        logger.debug("update_element: unknown element %s", element_id)
        return block

    elements = list(block.elements)
    elements[index] = replace(elements[index], content=copy.deepcopy(dict(new_content)))
    return replace(block, content=replace(block.content, elements=tuple(elements)))


def delete_element(block: Block, element_id: str) -> Block:
    index = block.element_index(element_id)
    if index == -1:
        logger.debug("delete_element: unknown element %s", element_id)
        return block

    elements = list(block.elements)
    del elements[index]
    return _with_elements(block, elements)


def move_element(
    source_block: Block,
    target_block: Block,
    source_element_id: str,
    target_element_id: str,
) -> Block:
    """
    Reorder within one block: the source element is removed and reinserted
    at the target element's index.

    Moving across blocks is not a single operation; callers compose
    delete_element on the source with insert_element on the target.
    Returns source_block unchanged for cross-block calls, equal ids or
    unknown ids.
    """
    if source_block.id != target_block.id or source_element_id == target_element_id:
        return source_block

    source_index = source_block.element_index(source_element_id)
    target_index = source_block.element_index(target_element_id)
    if source_index == -1 or target_index == -1:
        logger.debug(
            "move_element: unknown element %s or %s",
            source_element_id,
            target_element_id,
        )
        return source_block

    elements = list(source_block.elements)
    moved = elements.pop(source_index)
    elements.insert(target_index, moved)
    return _with_elements(source_block, elements)


def is_last_element(block: Block, element: Element) -> bool:
    return element.order == len(block.elements) - 1


# -------------------------------------------------
# Style copy / paste
# -------------------------------------------------

def copy_element_style(element: Element) -> Dict[str, Any]:
    style = {"type": element.type.value}
    for name in STYLE_FIELDS:
        style[name] = element.content.get(name)
    return style


def paste_element_style(block: Block, element_id: str, style: Optional[Mapping[str, Any]]) -> Block:
    element = block.find_element(element_id)
    if element is None or not style:
        return block

    content = dict(element.content)
    for name in STYLE_FIELDS:
        # An unset source field is left off the target
        if style.get(name) is not None:
            content[name] = style[name]
    if content == element.content:
        return block
    return update_element(block, element_id, content)


# -------------------------------------------------
# Element operations addressed through the block sequence
# -------------------------------------------------

def _replace_block(blocks: Sequence[Block], block_id, change) -> List[Block]:
    index = _find_index(blocks, block_id)
    if index == -1:
        logger.debug("unknown block %s", block_id)
        return list(blocks)

    result = list(blocks)
    result[index] = change(blocks[index])
    return result


def add_element_to(
    blocks: Sequence[Block],
    block_id,
    element_type: ElementType,
    after_index: Optional[int] = None,
    style_hint: Optional[str] = None,
) -> List[Block]:
    return _replace_block(
        blocks, block_id,
        lambda block: add_element(block, element_type, after_index, style_hint),
    )


def update_element_in(blocks: Sequence[Block], block_id, element_id: str, new_content) -> List[Block]:
    return _replace_block(
        blocks, block_id,
        lambda block: update_element(block, element_id, new_content),
    )


def delete_element_from(blocks: Sequence[Block], block_id, element_id: str) -> List[Block]:
    return _replace_block(
        blocks, block_id,
        lambda block: delete_element(block, element_id),
    )


def move_element_within(
    blocks: Sequence[Block],
    block_id,
    source_element_id: str,
    target_element_id: str,
) -> List[Block]:
    return _replace_block(
        blocks, block_id,
        lambda block: move_element(block, block, source_element_id, target_element_id),
    )


def paste_element_style_in(blocks: Sequence[Block], block_id, element_id: str, style) -> List[Block]:
    return _replace_block(
        blocks, block_id,
        lambda block: paste_element_style(block, element_id, style),
    )


def transfer_element(
    blocks: Sequence[Block],
    source_block_id,
    element_id: str,
    target_block_id,
    target_element_id: Optional[str] = None,
) -> List[Block]:
    """
    Move an element into another block, ahead of target_element_id (or at
    the end). Built from delete_element then insert_element so the element
    is never held by two blocks.
    """
    source_index = _find_index(blocks, source_block_id)
    target_index = _find_index(blocks, target_block_id)
    if source_index == -1 or target_index == -1:
        return list(blocks)

    if source_index == target_index:
        if target_element_id is None:
            return list(blocks)
        return move_element_within(blocks, source_block_id, element_id, target_element_id)

    element = blocks[source_index].find_element(element_id)
    if element is None:
        return list(blocks)

    target = blocks[target_index]
    at_index = None
    if target_element_id is not None:
        at_index = target.element_index(target_element_id)
        if at_index == -1:
            return list(blocks)

    result = list(blocks)
    result[source_index] = delete_element(blocks[source_index], element_id)
    if target.find_element(element.id) is not None:
        element = replace(element, id=new_element_id())
    result[target_index] = insert_element(target, element, at_index)
    return result
