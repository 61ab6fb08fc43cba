from proposal_builder.domain.document.engine import is_last_element


def normalize_element(block, element):
    data = element.to_dict()
    # Editor-only hint; never part of the stored content
    data["is_last"] = is_last_element(block, element)
    return data


def normalize_block(block):
    """Editor shape of one block; document_from_payload reads it back."""
    content = block.content.to_dict()
    content["elements"] = [
        normalize_element(block, element) for element in block.elements
    ]

    return {
        "id": block.id.value,
        "is_pending": block.is_pending,
        "order": block.order,
        "background_color": block.background_color,
        "visible": block.visible,
        "section_type": block.section_type,
        "title": block.title,
        "content": content,
    }


def normalize_document(session):
    return {
        "proposal_id": session.proposal_id,
        "has_unsaved_changes": session.has_unsaved_changes,
        "blocks": [normalize_block(block) for block in session.blocks],
    }
