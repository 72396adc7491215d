"""Store failures over HTTP — real get_db, card table missing.

Invariants:
    - Any SQLAlchemy failure reaches the client as 503 DATABASE_ERROR
    - No SQL text or driver message leaks into the response
    - Auth and role checks still answer before the store is touched
"""

from tests.services.ledger_fixtures import HANK, SARAH


async def test_read_against_missing_schema_returns_503(unmigrated_client):
    res = await unmigrated_client.get("/cards/99", auth=SARAH)
    assert res.status_code == 503
    error = res.json()["error"]
    assert error["code"] == "DATABASE_ERROR"
    assert "cash_cards" not in error["message"]
    assert "SELECT" not in error["message"]


async def test_every_card_operation_maps_store_failure(unmigrated_client):
    responses = [
        await unmigrated_client.get("/cards", auth=SARAH),
        await unmigrated_client.post("/cards", json={"amount": 1}, auth=SARAH),
        await unmigrated_client.put("/cards/99", json={"amount": 1}, auth=SARAH),
        await unmigrated_client.delete("/cards/99", auth=SARAH),
    ]
    assert [r.status_code for r in responses] == [503] * 4
    assert {r.json()["error"]["code"] for r in responses} == {"DATABASE_ERROR"}


async def test_auth_and_role_answer_before_store(unmigrated_client):
    assert (await unmigrated_client.get("/cards/99")).status_code == 401
    assert (await unmigrated_client.get("/cards/99", auth=HANK)).status_code == 403


async def test_readiness_still_ready_without_tables(unmigrated_client):
    res = await unmigrated_client.get("/health/ready")
    assert res.status_code == 200
