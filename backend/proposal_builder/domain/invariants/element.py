from .block import assert_dense_order
from .exceptions import InvariantViolation


def assert_element_order(block):
    assert_dense_order(
        [element.order for element in block.elements],
        f"Element (block {block.id})",
    )


def assert_unique_element_ids(block):
    ids = [element.id for element in block.elements]
    duplicates = sorted({element_id for element_id in ids if ids.count(element_id) > 1})
    if duplicates:
        raise InvariantViolation(
            f"Block {block.id} has duplicate element ids: {duplicates}"
        )
