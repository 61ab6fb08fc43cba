# tests/test_api_document.py
"""HTTP tests for loading and saving the block document."""

import pytest

from proposal_builder.domain.document.elements import HEADING_HTML


def document(client, headers, proposal_id):
    response = client.get(f"/api/v1/proposals/{proposal_id}", headers=headers)
    assert response.status_code == 200
    return response.get_json()["document"]


def put_document(client, headers, proposal_id, blocks):
    return client.put(
        f"/api/v1/proposals/{proposal_id}/document",
        json={"blocks": blocks},
        headers=headers,
    )


def post_commands(client, headers, proposal_id, commands, extra_headers=None):
    return client.post(
        f"/api/v1/proposals/{proposal_id}/document/commands",
        json={"commands": commands},
        headers={**headers, **(extra_headers or {})},
    )


def pricing_block(order, visible=True):
    return {
        "order": order,
        "visible": visible,
        "background_color": "#FAFAFA",
        "content": {
            "background_color": "#FAFAFA",
            "elements": [{
                "id": f"price-{order}",
                "type": "pricing",
                "display_order": 0,
                "content": {
                    "lineItems": [{"id": "li-1", "description": "Design", "quantity": 2, "unit_price": 500}],
                    "discount": {"type": "percentage", "value": 10},
                    "currency": "USD",
                },
            }],
        },
    }


class TestLoadDocument:
    def test_new_proposal_shows_seeded_block(self, client, auth_headers, create_proposal):
        proposal_id = create_proposal()

        doc = document(client, auth_headers, proposal_id)

        assert doc["has_unsaved_changes"] is True
        assert len(doc["blocks"]) == 1
        block = doc["blocks"][0]
        assert block["is_pending"] is True
        assert block["order"] == 0
        assert block["background_color"] == "#FFFFFF"
        element = block["content"]["elements"][0]
        assert element["type"] == "text"
        assert element["content"] == {"html": HEADING_HTML}
        assert element["is_last"] is True

    def test_loading_does_not_store_seed(self, app, client, auth_headers, create_proposal):
        from proposal_builder.models import ProposalSection

        proposal_id = create_proposal()
        document(client, auth_headers, proposal_id)

        assert ProposalSection.query.filter_by(proposal_id=proposal_id).count() == 0


class TestPutDocument:
    def test_save_round_trip(self, client, auth_headers, create_proposal):
        proposal_id = create_proposal()
        blocks = document(client, auth_headers, proposal_id)["blocks"]

        response = put_document(client, auth_headers, proposal_id, blocks)

        assert response.status_code == 200
        saved = response.get_json()["document"]
        assert saved["has_unsaved_changes"] is False
        assert saved["blocks"][0]["is_pending"] is False
        assert saved["blocks"][0]["content"]["elements"] == blocks[0]["content"]["elements"]
        assert document(client, auth_headers, proposal_id)["blocks"] == saved["blocks"]

    def test_bare_list_payload(self, client, auth_headers, create_proposal):
        proposal_id = create_proposal()
        blocks = document(client, auth_headers, proposal_id)["blocks"]

        response = client.put(
            f"/api/v1/proposals/{proposal_id}/document", json=blocks, headers=auth_headers,
        )

        assert response.status_code == 200

    def test_removed_blocks_are_deleted(self, client, auth_headers, create_proposal):
        proposal_id = create_proposal()
        post_commands(client, auth_headers, proposal_id, [{"op": "add_block"}])
        blocks = document(client, auth_headers, proposal_id)["blocks"]
        kept = dict(blocks[1], order=0)

        response = put_document(client, auth_headers, proposal_id, [kept])

        saved = response.get_json()["document"]["blocks"]
        assert [block["id"] for block in saved] == [blocks[1]["id"]]

    def test_gapped_orders_rejected(self, client, auth_headers, create_proposal):
        proposal_id = create_proposal()

        response = put_document(client, auth_headers, proposal_id, [pricing_block(0), pricing_block(2)])

        assert response.status_code == 400
        assert response.get_json()["error"] == "InvariantViolation"
        assert document(client, auth_headers, proposal_id)["blocks"][0]["is_pending"] is True

    def test_disagreeing_colors_rejected(self, client, auth_headers, create_proposal):
        proposal_id = create_proposal()
        block = pricing_block(0)
        block["background_color"] = "#000000"

        response = put_document(client, auth_headers, proposal_id, [block])

        assert response.status_code == 400
        assert response.get_json()["error"] == "InvariantViolation"

    @pytest.mark.parametrize("payload", [
        {"blocks": "nope"},
        {"blocks": [{"order": 0}]},
        {"blocks": [{"order": 0, "content": {"elements": [{"id": "x", "type": "marquee", "display_order": 0}]}}]},
    ])
    def test_malformed_payload(self, client, auth_headers, create_proposal, payload):
        proposal_id = create_proposal()

        response = client.put(f"/api/v1/proposals/{proposal_id}/document", json=payload, headers=auth_headers)

        assert response.status_code == 400
        assert response.get_json()["error"] == "BadRequest"

    def test_unknown_section_id_rejected(self, client, auth_headers, create_proposal):
        proposal_id = create_proposal()
        block = dict(pricing_block(0), id="not-a-stored-section", is_pending=False)

        response = put_document(client, auth_headers, proposal_id, [block])

        assert response.status_code == 400
        assert response.get_json()["error"] == "BadRequest"

    def test_other_proposals_section_rejected(self, client, auth_headers, create_proposal):
        from proposal_builder.models import ProposalSection

        source_id = create_proposal(title="Source")
        post_commands(client, auth_headers, source_id, [{"op": "add_block"}])
        foreign = document(client, auth_headers, source_id)["blocks"][0]
        target_id = create_proposal(title="Target")

        response = put_document(client, auth_headers, target_id, [dict(foreign, order=0)])

        assert response.status_code == 400
        assert ProposalSection.query.filter_by(proposal_id=target_id).count() == 0
        assert document(client, auth_headers, source_id)["blocks"][0] == foreign

    def test_total_amount_follows_visible_pricing(self, client, auth_headers, create_proposal):
        proposal_id = create_proposal()

        put_document(client, auth_headers, proposal_id, [pricing_block(0), pricing_block(1, visible=False)])

        proposal = client.get(f"/api/v1/proposals/{proposal_id}", headers=auth_headers).get_json()["proposal"]
        assert proposal["total_amount"] == 900.0

    def test_save_records_edited_event(self, client, auth_headers, create_proposal):
        proposal_id = create_proposal()
        put_document(client, auth_headers, proposal_id, [pricing_block(0)])

        events = client.get(
            f"/api/v1/proposals/{proposal_id}/events",
            query_string={"event_type": "EDITED"},
            headers=auth_headers,
        ).get_json()["items"]

        assert len(events) == 1
        assert events[0]["event_data"] == {"source": "document", "inserted": 1, "updated": 0, "deleted": 0}

    def test_viewer_cannot_save(self, client, viewer_headers, create_proposal):
        proposal_id = create_proposal()

        response = put_document(client, viewer_headers, proposal_id, [pricing_block(0)])

        assert response.status_code == 403


class TestOptimisticLock:
    def test_stale_save_conflicts(self, client, auth_headers, create_proposal):
        proposal_id = create_proposal()

        response = post_commands(
            client, auth_headers, proposal_id, [{"op": "add_block"}],
            extra_headers={"If-Unmodified-Since": "Mon, 01 Jan 2001 00:00:00 GMT"},
        )

        assert response.status_code == 409

    def test_fresh_save_passes(self, client, auth_headers, create_proposal):
        proposal_id = create_proposal()

        response = post_commands(
            client, auth_headers, proposal_id, [{"op": "add_block"}],
            extra_headers={"If-Unmodified-Since": "Fri, 01 Jan 2100 00:00:00 GMT"},
        )

        assert response.status_code == 200

    def test_invalid_header(self, client, auth_headers, create_proposal):
        proposal_id = create_proposal()

        response = post_commands(
            client, auth_headers, proposal_id, [{"op": "add_block"}],
            extra_headers={"If-Unmodified-Since": "not a date"},
        )

        assert response.status_code == 400


class TestCommands:
    def test_commands_are_applied_and_saved(self, client, auth_headers, create_proposal):
        proposal_id = create_proposal()

        response = post_commands(client, auth_headers, proposal_id, [
            {"op": "add_block"},
            {"op": "set_block_color", "block_id": "missing", "color": "#000000"},
        ])

        assert response.status_code == 200
        blocks = response.get_json()["document"]["blocks"]
        assert [block["order"] for block in blocks] == [0, 1]
        assert not any(block["is_pending"] for block in blocks)

    def test_element_commands(self, client, auth_headers, create_proposal):
        proposal_id = create_proposal()
        post_commands(client, auth_headers, proposal_id, [{"op": "add_block"}])
        first, second = document(client, auth_headers, proposal_id)["blocks"]
        heading = first["content"]["elements"][0]["id"]

        response = post_commands(client, auth_headers, proposal_id, [
            {"op": "add_element", "block_id": first["id"], "type": "button"},
            {"op": "move_element", "source_block_id": first["id"], "source_element_id": heading,
             "target_block_id": second["id"], "target_element_id": second["content"]["elements"][0]["id"]},
        ])

        blocks = response.get_json()["document"]["blocks"]
        assert [e["type"] for e in blocks[0]["content"]["elements"]] == ["button"]
        assert [e["id"] for e in blocks[1]["content"]["elements"]][0] == heading
        assert [e["display_order"] for e in blocks[1]["content"]["elements"]] == [0, 1]

    def test_noop_commands_do_not_save(self, client, auth_headers, create_proposal):
        proposal_id = create_proposal()
        post_commands(client, auth_headers, proposal_id, [{"op": "add_block"}])

        response = post_commands(client, auth_headers, proposal_id, [
            {"op": "delete_block", "block_id": "missing"},
        ])

        assert response.status_code == 200
        edited = client.get(
            f"/api/v1/proposals/{proposal_id}/events",
            query_string={"event_type": "EDITED"},
            headers=auth_headers,
        ).get_json()["items"]
        assert len(edited) == 1

    @pytest.mark.parametrize("body", [{"commands": "add_block"}, {}, []])
    def test_commands_must_be_a_list(self, client, auth_headers, create_proposal, body):
        proposal_id = create_proposal()

        response = client.post(
            f"/api/v1/proposals/{proposal_id}/document/commands", json=body, headers=auth_headers,
        )

        assert response.status_code == 400

    @pytest.mark.parametrize("command", [
        {"op": "add_block", "after_index": "0"},
        {"op": "add_element", "block_id": "any", "type": "text", "after_index": "1"},
        {"op": "set_block_visibility", "block_id": "any", "visible": "false"},
    ])
    def test_badly_typed_arguments(self, client, auth_headers, create_proposal, command):
        proposal_id = create_proposal()

        response = post_commands(client, auth_headers, proposal_id, [command])

        assert response.status_code == 400
        assert response.get_json()["error"] == "BadRequest"

    def test_unknown_command(self, client, auth_headers, create_proposal):
        proposal_id = create_proposal()

        response = post_commands(client, auth_headers, proposal_id, [{"op": "explode"}])

        assert response.status_code == 400
        assert "explode" in response.get_json()["message"]
