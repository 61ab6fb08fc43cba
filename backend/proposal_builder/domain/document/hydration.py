"""
Conversion between stored section records and the in-memory document.

Stored record shape (one per block, as fetched for a proposal):

    {
        "id": str,
        "display_order": int,
        "section_type": str,
        "title": str | None,
        "content": {"background_color": "#FFFFFF", "elements": [...]},
        "is_visible": bool,
    }

Loading is lenient: legacy or malformed content degrades to safe defaults
instead of failing. Editor payloads (the shape produced by
normalizers.document) are parsed strictly so that invariant guards can
reject an inconsistent client document.
"""
import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from proposal_builder.utils.order import compact_order

from .blocks import (
    DEFAULT_BACKGROUND_COLOR,
    DEFAULT_SECTION_TYPE,
    Block,
    BlockContent,
    new_block,
)
from .elements import Element, parse_element_type
from .ids import PendingId, PersistedId, new_element_id, new_pending_id

CONTENT_KEYS = ("background_color", "elements")


@dataclass
class SavePlan:
    """Per-block storage writes; the caller issues one write per entry."""
    inserts: List[Dict[str, Any]] = field(default_factory=list)
    updates: List[Dict[str, Any]] = field(default_factory=list)
    deletes: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.inserts or self.updates or self.deletes)


def _sort_key(position: int, raw: Mapping[str, Any], order_key: str):
    order = raw.get(order_key)
    if isinstance(order, bool) or not isinstance(order, (int, float)):
        return (1, position)
    return (0, order, position)


def _load_elements(raw_elements: Any) -> List[Element]:
    if not isinstance(raw_elements, list):
        return []

    candidates = [
        (position, raw) for position, raw in enumerate(raw_elements)
        if isinstance(raw, Mapping)
    ]
    candidates.sort(key=lambda pair: _sort_key(pair[0], pair[1], "display_order"))

    elements: List[Element] = []
    seen_ids = set()
    for _, raw in candidates:
        element_type = parse_element_type(raw.get("type"))
        if element_type is None:
            continue

        element_id = raw.get("id")
        if not element_id or element_id in seen_ids:
            element_id = new_element_id()
        seen_ids.add(element_id)

        content = raw.get("content")
        elements.append(Element(
            id=str(element_id),
            type=element_type,
            order=len(elements),
            content=copy.deepcopy(dict(content)) if isinstance(content, Mapping) else {},
        ))
    return elements


def _split_content(raw_content: Any):
    content = raw_content if isinstance(raw_content, Mapping) else {}
    extras = {
        key: copy.deepcopy(value)
        for key, value in content.items()
        if key not in CONTENT_KEYS
    }
    color = content.get("background_color") or DEFAULT_BACKGROUND_COLOR
    return content, extras, color


def hydrate(records: Iterable[Mapping[str, Any]], seed_default: bool = True) -> List[Block]:
    """
    Build the editable block sequence from stored records.

    An empty proposal is seeded with one pending default block.
    """
    indexed = [(position, record) for position, record in enumerate(records or [])]
    indexed.sort(key=lambda pair: _sort_key(pair[0], pair[1], "display_order"))

    blocks: List[Block] = []
    for _, record in indexed:
        content, extras, color = _split_content(record.get("content"))
        record_id = record.get("id")
        blocks.append(Block(
            id=PersistedId(str(record_id)) if record_id else new_pending_id(),
            order=len(blocks),
            background_color=color,
            content=BlockContent(
                background_color=color,
                elements=tuple(_load_elements(content.get("elements"))),
                extras=extras,
            ),
            visible=bool(record.get("is_visible", True)),
            section_type=record.get("section_type") or DEFAULT_SECTION_TYPE,
            title=record.get("title"),
        ))

    if not blocks and seed_default:
        blocks.append(new_block())

    return compact_order(blocks)


def _require(raw: Mapping[str, Any], key: str, kind, label: str):
    value = raw.get(key)
    if isinstance(value, bool) and kind is int:
        raise ValueError(f"{label}.{key} must be an integer")
    if not isinstance(value, kind):
        raise ValueError(f"{label}.{key} is missing or invalid")
    return value


def document_from_payload(payload: Any) -> List[Block]:
    """
    Parse an editor document (list of blocks) without renumbering or
    repairing it. Raises ValueError on structurally invalid input.
    """
    if not isinstance(payload, list):
        raise ValueError("Document must be a list of blocks")

    blocks: List[Block] = []
    for raw in payload:
        if not isinstance(raw, Mapping):
            raise ValueError("Each block must be an object")

        raw_id = raw.get("id")
        if raw.get("is_pending") or not raw_id:
            block_id = PendingId(str(raw_id)) if raw_id else new_pending_id()
        else:
            block_id = PersistedId(str(raw_id))

        raw_content = _require(raw, "content", Mapping, "block")
        raw_elements = raw_content.get("elements", [])
        if not isinstance(raw_elements, list):
            raise ValueError("block.content.elements must be a list")

        elements = []
        for raw_element in raw_elements:
            if not isinstance(raw_element, Mapping):
                raise ValueError("Each element must be an object")
            element_type = parse_element_type(raw_element.get("type"))
            if element_type is None:
                raise ValueError(f"Unknown element type: {raw_element.get('type')!r}")
            content = raw_element.get("content") or {}
            if not isinstance(content, Mapping):
                raise ValueError("element.content must be an object")
            elements.append(Element(
                id=str(_require(raw_element, "id", str, "element")),
                type=element_type,
                order=_require(raw_element, "display_order", int, "element"),
                content=copy.deepcopy(dict(content)),
            ))

        color = raw.get("background_color") or DEFAULT_BACKGROUND_COLOR
        blocks.append(Block(
            id=block_id,
            order=_require(raw, "order", int, "block"),
            background_color=color,
            content=BlockContent(
                background_color=raw_content.get("background_color") or color,
                elements=tuple(elements),
                extras={
                    key: copy.deepcopy(value)
                    for key, value in raw_content.items()
                    if key not in CONTENT_KEYS
                },
            ),
            visible=bool(raw.get("visible", True)),
            section_type=raw.get("section_type") or DEFAULT_SECTION_TYPE,
            title=raw.get("title"),
        ))
    return blocks


def to_records(blocks: Sequence[Block]) -> List[Dict[str, Any]]:
    """Stored-record view of the document; inverse of hydrate."""
    return [
        {
            "id": block.id.value,
            "display_order": block.order,
            "section_type": block.section_type,
            "title": block.title,
            "content": block.content.to_dict(),
            "is_visible": block.visible,
        }
        for block in blocks
    ]


def flatten(blocks: Sequence[Block], loaded_ids: Optional[Iterable[str]] = None) -> SavePlan:
    """
    Split the document into insert payloads (pending blocks) and update
    payloads keyed by stored id. Stored ids in loaded_ids that are no
    longer present become deletes.
    """
    plan = SavePlan()
    kept = set()

    for block in blocks:
        if isinstance(block.id, PendingId):
            plan.inserts.append({
                "section_type": block.section_type,
                "title": block.title,
                "content": block.content.to_dict(),
                "display_order": block.order,
                "is_visible": block.visible,
            })
        elif isinstance(block.id, PersistedId):
            kept.add(block.id.value)
            plan.updates.append({
                "id": block.id.value,
                "content": block.content.to_dict(),
                "display_order": block.order,
                "is_visible": block.visible,
            })
        else:
            raise TypeError(f"Unexpected block id type: {type(block.id).__name__}")

    plan.deletes = [
        stored_id for stored_id in (loaded_ids or [])
        if stored_id not in kept
    ]
    return plan
