"""Cash Card Routes — end-to-end HTTP behaviour over the seeded ledger.

Invariants:
    - 401 for missing/bad credentials, 403 for principals without CARD-OWNER,
      404 for absent or foreign cards (same response shape)
    - POST answers 201 + Location with empty body; PUT/DELETE answer 204
    - Default listing is amount ascending; sort/size/page honoured
    - Ids or pages beyond what the store can hold answer 404 / 400, never 5xx
    - Non-owners get 403 even when their input is also invalid
"""

import base64

import pytest

from tests.services.ledger_fixtures import HANK, KUMAR, SARAH


# ─── GET /cards/{id} ─────────────────────────────────────────────

async def test_get_returns_owned_card(client):
    res = await client.get("/cards/99", auth=SARAH)
    assert res.status_code == 200
    body = res.json()
    assert body["id"] == 99
    assert body["amount"] == 123.45
    assert body["owner"] == "sarah1"


async def test_get_unknown_id_returns_404(client):
    res = await client.get("/cards/1000", auth=SARAH)
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "CARD_NOT_FOUND"


async def test_get_foreign_card_looks_like_unknown_card(client):
    foreign = await client.get("/cards/102", auth=SARAH)
    unknown = await client.get("/cards/1000", auth=SARAH)
    assert foreign.status_code == unknown.status_code == 404
    assert foreign.json()["error"]["code"] == unknown.json()["error"]["code"]
    assert foreign.json()["error"]["message"] == "Card '102' not found"


# ─── Authentication / role ───────────────────────────────────────

async def test_bad_username_returns_401(client):
    res = await client.get("/cards/99", auth=("BAD-USER", "abc123"))
    assert res.status_code == 401


async def test_bad_password_returns_401(client):
    res = await client.get("/cards/99", auth=("sarah1", "BAD-PASSWORD"))
    assert res.status_code == 401


async def test_missing_credentials_returns_401_with_basic_challenge(client):
    res = await client.get("/cards/99")
    assert res.status_code == 401
    assert res.headers["www-authenticate"].startswith("Basic")
    assert res.json()["error"]["code"] == "AUTHENTICATION_REQUIRED"


async def test_non_owner_role_is_forbidden_on_every_endpoint(client):
    responses = [
        await client.get("/cards/99", auth=HANK),
        await client.get("/cards/1000", auth=HANK),
        await client.get("/cards", auth=HANK),
        await client.post("/cards", json={"amount": 1}, auth=HANK),
        await client.put("/cards/99", json={"amount": 1}, auth=HANK),
        await client.delete("/cards/99", auth=HANK),
    ]
    assert [r.status_code for r in responses] == [403] * 6
    assert responses[0].json()["error"]["code"] == "ROLE_FORBIDDEN"


async def test_non_owner_is_forbidden_before_input_validation(client):
    responses = [
        await client.get("/cards/abc", auth=HANK),
        await client.get("/cards?sort=owner&size=abc", auth=HANK),
        await client.post("/cards", json={}, auth=HANK),
        await client.post("/cards", json={"amount": "lots"}, auth=HANK),
        await client.put("/cards/99", json={"amount": 1.234}, auth=HANK),
        await client.delete("/cards/abc", auth=HANK),
    ]
    assert [r.status_code for r in responses] == [403] * 6
    assert {r.json()["error"]["code"] for r in responses} == {"ROLE_FORBIDDEN"}


@pytest.mark.parametrize("header", [
    "Basic !!!not-base64!!!",
    "Basic " + base64.b64encode(b"no-colon-here").decode(),
    "Basic " + base64.b64encode(b"\xff\xfe:abc123").decode(),
])
async def test_malformed_basic_header_returns_401_envelope(client, header):
    res = await client.get("/cards/99", headers={"Authorization": header})
    assert res.status_code == 401
    assert res.headers["www-authenticate"].startswith("Basic")
    assert res.json()["error"]["code"] == "AUTHENTICATION_REQUIRED"


# ─── POST /cards ─────────────────────────────────────────────────

async def test_create_returns_201_with_location_and_empty_body(client):
    res = await client.post("/cards", json={"amount": 250.00}, auth=SARAH)
    assert res.status_code == 201
    assert res.content == b""
    location = res.headers["location"]
    assert location.startswith("/cards/")

    fetched = await client.get(location, auth=SARAH)
    assert fetched.status_code == 200
    body = fetched.json()
    assert body["id"] is not None
    assert body["amount"] == 250.00
    assert body["owner"] == "sarah1"


async def test_create_ignores_client_supplied_id_and_owner(client):
    res = await client.post(
        "/cards", json={"id": 99, "amount": 5, "owner": "kumar2"}, auth=SARAH,
    )
    assert res.status_code == 201
    location = res.headers["location"]
    assert location != "/cards/99"

    fetched = (await client.get(location, auth=SARAH)).json()
    assert fetched["owner"] == "sarah1"
    assert (await client.get(location, auth=KUMAR)).status_code == 404

    original = (await client.get("/cards/99", auth=SARAH)).json()
    assert original["amount"] == 123.45


async def test_created_ids_are_unique(client):
    first = await client.post("/cards", json={"amount": 1}, auth=SARAH)
    second = await client.post("/cards", json={"amount": 1}, auth=KUMAR)
    assert first.headers["location"] != second.headers["location"]


async def test_create_accepts_negative_amount(client):
    res = await client.post("/cards", json={"amount": -10.50}, auth=SARAH)
    assert res.status_code == 201
    fetched = (await client.get(res.headers["location"], auth=SARAH)).json()
    assert fetched["amount"] == -10.50


async def test_create_rejects_malformed_amount(client):
    assert (await client.post(
        "/cards", json={"amount": "lots"}, auth=SARAH,
    )).status_code == 400
    assert (await client.post(
        "/cards", json={"amount": 1.234}, auth=SARAH,
    )).status_code == 400
    assert (await client.post("/cards", json={}, auth=SARAH)).status_code == 400


# ─── GET /cards ──────────────────────────────────────────────────

async def test_list_defaults_to_amount_ascending(client):
    res = await client.get("/cards", auth=SARAH)
    assert res.status_code == 200
    cards = res.json()
    assert [c["id"] for c in cards] == [100, 99, 101]
    assert [c["amount"] for c in cards] == [1.00, 123.45, 150.00]


async def test_list_only_returns_own_cards(client):
    res = await client.get("/cards", auth=KUMAR)
    assert [c["id"] for c in res.json()] == [102]


async def test_list_returns_requested_page_size(client):
    res = await client.get("/cards?page=0&size=1", auth=SARAH)
    assert res.status_code == 200
    assert len(res.json()) == 1


async def test_list_sorted_descending_returns_largest_first(client):
    res = await client.get(
        "/cards?page=0&size=1&sort=amount,desc", auth=SARAH,
    )
    assert res.status_code == 200
    cards = res.json()
    assert len(cards) == 1
    assert cards[0]["amount"] == 150.00


async def test_list_second_page(client):
    res = await client.get("/cards?page=1&size=2", auth=SARAH)
    assert [c["id"] for c in res.json()] == [101]


async def test_list_sort_by_id_descending(client):
    res = await client.get("/cards?sort=id,desc", auth=SARAH)
    assert [c["id"] for c in res.json()] == [101, 100, 99]


async def test_list_rejects_malformed_query(client):
    for query in (
        "sort=owner", "sort=amount,sideways", "sort=amount,desc,id",
        "size=abc", "size=0", "page=-1",
    ):
        res = await client.get(f"/cards?{query}", auth=SARAH)
        assert res.status_code == 400, query
        assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_list_page_beyond_storable_offset_returns_400(client):
    res = await client.get("/cards?page=99999999999999999999&size=1", auth=SARAH)
    assert res.status_code == 400
    assert res.json()["error"]["details"][0]["field"] == "page"


# ─── PUT /cards/{id} ─────────────────────────────────────────────

async def test_update_replaces_amount_and_keeps_identity(client):
    res = await client.put("/cards/99", json={"amount": 19.99}, auth=SARAH)
    assert res.status_code == 204
    assert res.content == b""

    body = (await client.get("/cards/99", auth=SARAH)).json()
    assert body == {"id": 99, "amount": 19.99, "owner": "sarah1"}


async def test_update_unknown_card_returns_404(client):
    res = await client.put("/cards/99999", json={"amount": 19.99}, auth=SARAH)
    assert res.status_code == 404


async def test_update_foreign_card_returns_404_and_leaves_it_unchanged(client):
    res = await client.put("/cards/102", json={"amount": 333.33}, auth=SARAH)
    assert res.status_code == 404

    body = (await client.get("/cards/102", auth=KUMAR)).json()
    assert body["amount"] == 200.00


# ─── DELETE /cards/{id} ──────────────────────────────────────────

async def test_delete_removes_card(client):
    res = await client.delete("/cards/99", auth=SARAH)
    assert res.status_code == 204
    assert (await client.get("/cards/99", auth=SARAH)).status_code == 404


async def test_repeated_delete_returns_404(client):
    assert (await client.delete("/cards/99", auth=SARAH)).status_code == 204
    assert (await client.delete("/cards/99", auth=SARAH)).status_code == 404


async def test_delete_foreign_card_returns_404_and_keeps_it(client):
    res = await client.delete("/cards/102", auth=SARAH)
    assert res.status_code == 404
    assert (await client.get("/cards/102", auth=KUMAR)).status_code == 200


# ─── Health ──────────────────────────────────────────────────────

async def test_health_probes(client):
    live = await client.get("/health/")
    ready = await client.get("/health/ready")
    assert live.status_code == 200
    assert ready.status_code == 200
    assert ready.json()["checks"]["database"] == "healthy"


# ─── Out-of-range ids ────────────────────────────────────────────

@pytest.mark.parametrize("card_id", ["99999999999999999999", "2147483648", "0", "-1"])
async def test_unstorable_id_returns_404_on_every_card_route(client, card_id):
    responses = [
        await client.get(f"/cards/{card_id}", auth=SARAH),
        await client.put(f"/cards/{card_id}", json={"amount": 1}, auth=SARAH),
        await client.delete(f"/cards/{card_id}", auth=SARAH),
    ]
    assert [r.status_code for r in responses] == [404] * 3
    assert {r.json()["error"]["code"] for r in responses} == {"CARD_NOT_FOUND"}
