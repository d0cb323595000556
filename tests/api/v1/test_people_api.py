"""API tests for people, their entries and the settle flag."""

PEOPLE = "/api/v1/people"


def create_person(test_client, name="Dana"):
    response = test_client.post(PEOPLE, json={"name": name})
    assert response.status_code == 201
    return response.json()


def add_entry(test_client, person_id, amount, transaction_type="debit", **extra):
    return test_client.post(
        f"{PEOPLE}/{person_id}/entries",
        json={"amount": amount, "transaction_type": transaction_type, **extra}
    )


def test_create_and_list_people(test_client):
    dana = create_person(test_client)
    add_entry(test_client, dana["id"], 1200)

    response = test_client.get(PEOPLE)

    assert response.status_code == 200
    people = response.json()
    assert [p["name"] for p in people] == ["Dana"]
    assert people[0]["approval_status"] is False
    assert people[0]["balance"]["remaining_due"] == 1200


def test_blank_name_is_rejected(test_client):
    response = test_client.post(PEOPLE, json={"name": "   "})

    assert response.status_code == 400
    assert response.json()["error"] == "ValidationError"


def test_missing_name_is_unprocessable(test_client):
    response = test_client.post(PEOPLE, json={})

    assert response.status_code == 422
    assert response.json()["details"][0]["field"] == "body -> name"


def test_self_note_counts_immediately(test_client):
    dana = create_person(test_client)

    response = add_entry(test_client, dana["id"], 500, description="Lunch")

    assert response.status_code == 201
    body = response.json()
    assert body["entry"]["status"] == "approved"
    assert body["entry"]["counterparty"] == "anonymous"
    assert body["counterpart_id"] is None

    balance = test_client.get(f"{PEOPLE}/{dana['id']}/balance").json()
    assert balance == {
        "total_lent": 500,
        "total_repaid": 0,
        "total_owed": 0,
        "remaining_due": 500
    }


def test_zero_amount_is_rejected(test_client):
    dana = create_person(test_client)

    response = add_entry(test_client, dana["id"], 0)

    assert response.status_code == 400
    assert response.json()["error"] == "ValidationError"


def test_unregistered_counterparty_is_forbidden(test_client):
    dana = create_person(test_client)

    response = add_entry(test_client, dana["id"], 100, counterparty="507f1f77bcf86cd799439011")

    assert response.status_code == 403
    assert response.json()["error"] == "AuthorizationError"


def test_unknown_person_is_not_found(test_client):
    response = test_client.get(f"{PEOPLE}/999")

    assert response.status_code == 404
    assert response.json()["error"] == "NotFoundError"


def test_settle_gate(test_client):
    dana = create_person(test_client)
    add_entry(test_client, dana["id"], 500)

    refused = test_client.put(f"{PEOPLE}/{dana['id']}/approval", json={"approval_status": True})
    assert refused.status_code == 409
    assert refused.json()["error"] == "InvariantViolation"

    add_entry(test_client, dana["id"], 500, transaction_type="credit")
    settled = test_client.put(f"{PEOPLE}/{dana['id']}/approval", json={"approval_status": True})
    assert settled.status_code == 200
    assert settled.json()["approval_status"] is True

    revoked = test_client.put(f"{PEOPLE}/{dana['id']}/approval", json={"approval_status": False})
    assert revoked.json()["approval_status"] is False


def test_rename_and_delete(test_client):
    dana = create_person(test_client)

    renamed = test_client.patch(f"{PEOPLE}/{dana['id']}", json={"name": "Dana S"})
    assert renamed.json()["name"] == "Dana S"

    assert test_client.delete(f"{PEOPLE}/{dana['id']}").status_code == 204
    assert test_client.get(PEOPLE).json() == []
    assert test_client.get(f"{PEOPLE}/{dana['id']}").status_code == 404


def test_history_counts_archived_entries(test_client):
    dana = create_person(test_client)
    entry = add_entry(test_client, dana["id"], 300).json()["entry"]
    add_entry(test_client, dana["id"], 100, transaction_type="credit")

    archived = test_client.post(f"/api/v1/ledger/{entry['id']}/archive")
    assert archived.json()["status"] == "archived"

    history = test_client.get(f"{PEOPLE}/{dana['id']}/history").json()
    assert history["total_lent"] == 300
    assert history["total_repaid"] == 100
    assert history["status_counts"]["archived"] == 1

    entries = test_client.get(f"{PEOPLE}/{dana['id']}/entries").json()
    assert len(entries) == 2

    balance = test_client.get(f"{PEOPLE}/{dana['id']}/balance").json()
    assert balance["remaining_due"] == -100
    assert balance["total_owed"] == 100


def test_overlong_name_is_a_validation_error(test_client):
    dana = create_person(test_client)

    created = test_client.post(PEOPLE, json={"name": "x" * 101})
    renamed = test_client.patch(f"{PEOPLE}/{dana['id']}", json={"name": "x" * 101})

    for response in (created, renamed):
        assert response.status_code == 400
        assert response.json()["error"] == "ValidationError"
