from .exceptions import InvariantViolation


def assert_dense_order(orders, label):
    expected = list(range(len(orders)))
    if sorted(orders) != expected:
        raise InvariantViolation(
            f"{label} orders are not consecutive starting from 0: {orders}"
        )


def assert_block_order(blocks):
    assert_dense_order([block.order for block in blocks], "Block")


def assert_block_color(block):
    if block.background_color != block.content.background_color:
        raise InvariantViolation(
            f"Block {block.id} background colors disagree: "
            f"{block.background_color} != {block.content.background_color}"
        )
