def _iso(value):
    return value.isoformat() if value else None


def normalize_proposal(proposal, admin=False):
    data = {
        "id": proposal.id,
        "title": proposal.title,
        "status": proposal.status,
        "is_template": proposal.is_template,
        "client_name": proposal.client_name,
        "client_company": proposal.client_company,
        "currency": proposal.currency,
        "total_amount": proposal.total_amount,
        "created_at": _iso(proposal.created_at),
    }

    if admin:
        data.update({
            "client_email": proposal.client_email,
            "custom_message": proposal.custom_message,
            "template_id": proposal.template_id,
            "updated_at": _iso(proposal.updated_at),
            "sent_at": _iso(proposal.sent_at),
            "viewed_at": _iso(proposal.viewed_at),
            "signed_at": _iso(proposal.signed_at),
            "paid_at": _iso(proposal.paid_at),
            "expires_at": _iso(proposal.expires_at),
        })

    return data
