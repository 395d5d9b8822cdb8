from __future__ import annotations

import json

from app import cli


def test_cli_update_runs_workflow(users, make_order, read_order, capsys):
    order_id = make_order("pending", "pending")

    code = cli.main(["orders", "update", order_id, "--status", "confirmed"])
    assert code == 1
    assert json.loads(capsys.readouterr().out)["error"] == "validation_rejected"

    code = cli.main(["orders", "update", order_id, "--status", "confirmed", "--payment-status", "paid"])
    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert (payload["status"], payload["payment_status"]) == ("confirmed", "paid")
    assert payload["listing"]["pagination"]["total"] == 1
    stored = read_order(order_id)
    assert stored.status == "confirmed"


def test_cli_update_requires_admin_user(users, make_order, capsys):
    order_id = make_order("pending", "pending")

    code = cli.main(["orders", "update", order_id, "--payment-status", "paid", "--user-id", users["user"].user_id])
    assert code == 1
    assert json.loads(capsys.readouterr().out)["error"] == "forbidden"


def test_cli_list_by_status(make_order, capsys):
    make_order("delivered", "paid")
    make_order("pending", "pending")

    assert cli.main(["orders", "list", "--status", "delivered"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert [o["status"] for o in payload["orders"]] == ["delivered"]


def test_cli_update_with_bad_page_writes_nothing(users, make_order, read_order, capsys):
    order_id = make_order("pending", "pending")

    code = cli.main(
        ["orders", "update", order_id, "--payment-status", "paid", "--status", "confirmed", "--page", "0"]
    )

    assert code == 2
    assert json.loads(capsys.readouterr().out) == {"error": "bad_request", "detail": "page must be >= 1"}
    stored = read_order(order_id)
    assert (stored.status, stored.payment_status) == ("pending", "pending")
