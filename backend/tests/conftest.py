# tests/conftest.py
"""Shared pytest fixtures and test helpers."""

import copy

import pytest
from flask_jwt_extended import create_access_token

from proposal_builder import create_app
from proposal_builder.extensions import db
from proposal_builder.application.proposals.section_store import PersistenceError
from proposal_builder.domain.document.blocks import Block, BlockContent
from proposal_builder.domain.document.elements import Element, ElementType
from proposal_builder.domain.document.ids import PersistedId


# -------------------------------------------------
# Flask app
# -------------------------------------------------

@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def _headers(user_id, role="admin", email=None):
    token = create_access_token(
        identity=user_id,
        additional_claims={"role": role, "email": email or f"{user_id}@example.com"},
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(app):
    return _headers("user-1")


@pytest.fixture
def other_user_headers(app):
    return _headers("user-2")


@pytest.fixture
def viewer_headers(app):
    return _headers("user-1", role="viewer")


@pytest.fixture
def create_proposal(client, auth_headers):
    """Factory: POST a proposal and return its id."""
    def _create(**data):
        data.setdefault("title", "Website redesign")
        response = client.post("/api/v1/proposals", json=data, headers=auth_headers)
        assert response.status_code == 201
        return response.get_json()["id"]
    return _create


# -------------------------------------------------
# Document model builders
# -------------------------------------------------

@pytest.fixture
def make_block():
    """
    Factory for persisted blocks.

    Usage:
        block = make_block("b1", order=0, elements=["e1", "e2"])
    """
    def _make_block(block_id, order=0, elements=(), color="#FFFFFF", visible=True):
        items = tuple(
            Element(
                id=element_id,
                type=ElementType.TEXT,
                order=index,
                content={"html": f"<p>{element_id}</p>"},
            )
            for index, element_id in enumerate(elements)
        )
        return Block(
            id=PersistedId(block_id),
            order=order,
            background_color=color,
            content=BlockContent(background_color=color, elements=items),
            visible=visible,
        )
    return _make_block


@pytest.fixture
def make_blocks(make_block):
    """Factory: persisted blocks b0..bN-1 at orders 0..N-1."""
    def _make_blocks(count, elements_per_block=1):
        return [
            make_block(
                f"b{index}",
                order=index,
                elements=[f"b{index}-e{n}" for n in range(elements_per_block)],
            )
            for index in range(count)
        ]
    return _make_blocks


# -------------------------------------------------
# Section stores for EditingSession tests
# -------------------------------------------------

class MemorySectionStore:
    """Section store keeping records in a list; ids are assigned on insert."""

    def __init__(self, records=None):
        self.records = copy.deepcopy(list(records or []))
        self.applied = []
        self._next_id = 1

    def fetch(self):
        return copy.deepcopy(sorted(self.records, key=lambda r: r["display_order"]))

    def apply(self, plan):
        self.applied.append(plan)
        by_id = {record["id"]: record for record in self.records}

        for section_id in plan.deletes:
            by_id.pop(section_id, None)

        for payload in plan.updates:
            by_id[payload["id"]].update(
                content=copy.deepcopy(payload["content"]),
                display_order=payload["display_order"],
                is_visible=payload["is_visible"],
            )

        for payload in plan.inserts:
            section_id = f"stored-{self._next_id}"
            self._next_id += 1
            by_id[section_id] = dict(copy.deepcopy(payload), id=section_id)

        self.records = list(by_id.values())


class FailingSectionStore(MemorySectionStore):
    def apply(self, plan):
        raise PersistenceError("connection reset by peer")


@pytest.fixture
def memory_store():
    return MemorySectionStore


@pytest.fixture
def failing_store():
    return FailingSectionStore


@pytest.fixture
def stored_records():
    """Two stored sections as the storage layer returns them."""
    return [
        {
            "id": "s-1",
            "display_order": 0,
            "section_type": "text",
            "title": None,
            "content": {
                "background_color": "#FFFFFF",
                "elements": [
                    {"id": "e-1", "type": "text", "content": {"html": "<h1>Hello</h1>"}, "display_order": 0},
                    {"id": "e-2", "type": "button", "content": {"buttonText": "Sign", "buttonUrl": "https://x.io"}, "display_order": 1},
                ],
            },
            "is_visible": True,
        },
        {
            "id": "s-2",
            "display_order": 1,
            "section_type": "text",
            "title": "Pricing",
            "content": {
                "background_color": "#F0F0F0",
                "elements": [
                    {
                        "id": "e-3",
                        "type": "pricing",
                        "content": {
                            "lineItems": [{"id": "li-1", "description": "Design", "quantity": 2, "unit_price": 500}],
                            "discount": {"type": "percentage", "value": 10},
                            "currency": "USD",
                        },
                        "display_order": 0,
                    },
                ],
            },
            "is_visible": False,
        },
    ]
