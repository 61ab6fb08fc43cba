# proposal_builder/normalizers/public.py
from __future__ import annotations

from typing import Any, Dict, List

from proposal_builder.domain.document.blocks import DEFAULT_BACKGROUND_COLOR
from proposal_builder.domain.document.elements import ElementType
from proposal_builder.domain.document.hydration import hydrate
from proposal_builder.domain.document.pricing import pricing_totals
from proposal_builder.models.proposal import Proposal


def _render_element(element) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "id": element.id,
        "type": element.type.value,
        "content": element.content,
    }
    if element.type is ElementType.PRICING:
        data["totals"] = pricing_totals(element.content)
    return data


def normalize_public_proposal(proposal: Proposal) -> Dict[str, Any]:
    """
    Read-only client view.

    Works from the stored snapshot only: hidden sections are left out,
    no editing affordances, pricing elements carry computed totals.
    """
    records = [section.to_record() for section in proposal.sections]
    blocks = hydrate(records, seed_default=False)

    rendered: List[Dict[str, Any]] = []
    for block in blocks:
        if not block.visible:
            continue
        rendered.append({
            "id": block.id.value,
            "background_color": block.content.background_color or DEFAULT_BACKGROUND_COLOR,
            "elements": [_render_element(element) for element in block.elements],
        })

    return {
        "id": proposal.id,
        "title": proposal.title or "Untitled Proposal",
        "client_company": proposal.client_company,
        "status": proposal.status,
        "currency": proposal.currency,
        "blocks": rendered,
    }
