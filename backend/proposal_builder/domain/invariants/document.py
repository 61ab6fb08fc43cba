from .block import assert_block_order, assert_block_color
from .element import assert_element_order, assert_unique_element_ids
from .exceptions import InvariantViolation


def assert_document(blocks):
    """Checked before a document is written to storage."""
    assert_block_order(blocks)

    ids = [str(block.id) for block in blocks]
    if len(set(ids)) != len(ids):
        raise InvariantViolation(f"Duplicate block ids in document: {ids}")

    for block in blocks:
        assert_block_color(block)
        assert_element_order(block)
        assert_unique_element_ids(block)
