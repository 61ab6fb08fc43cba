# tests/test_invariants.py
"""Tests for document invariant guards."""

from dataclasses import replace

import pytest

from proposal_builder.domain.document import engine
from proposal_builder.domain.invariants.document import assert_document
from proposal_builder.domain.invariants.exceptions import InvariantViolation


class TestAssertDocument:
    def test_engine_output_passes(self, make_blocks):
        blocks = engine.duplicate_block(engine.add_block(make_blocks(2, elements_per_block=2)), "b0")

        assert_document(blocks)

    def test_empty_document_passes(self):
        assert_document([])

    def test_gapped_block_orders(self, make_block):
        blocks = [make_block("a", order=0), make_block("b", order=2)]

        with pytest.raises(InvariantViolation, match="Block orders"):
            assert_document(blocks)

    def test_color_copies_disagree(self, make_block):
        block = make_block("a", color="#FFFFFF")
        block = replace(block, background_color="#000000")

        with pytest.raises(InvariantViolation, match="background colors"):
            assert_document([block])

    def test_duplicate_element_orders(self, make_block):
        block = make_block("a", elements=["e0", "e1"])
        elements = (block.elements[0], replace(block.elements[1], order=0))
        block = replace(block, content=replace(block.content, elements=elements))

        with pytest.raises(InvariantViolation, match="Element"):
            assert_document([block])

    def test_duplicate_element_ids(self, make_block):
        block = make_block("a", elements=["e0", "e0"])

        with pytest.raises(InvariantViolation, match="duplicate element ids"):
            assert_document([block])

    def test_duplicate_block_ids(self, make_block):
        with pytest.raises(InvariantViolation, match="Duplicate block ids"):
            assert_document([make_block("a", order=0), make_block("a", order=1)])
