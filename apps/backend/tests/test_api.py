from decimal import Decimal

import pytest

pytestmark = [pytest.mark.asyncio, pytest.mark.integration]

TEST_ETF = {
    "name": "Test ETF",
    "type": "ETF",
    "initialValue": 1000,
    "currentValue": 1000,
    "allePercentage": 60,
    "aliPercentage": 40,
    "purchaseDate": "2024-01-01",
    "createdBy": "alle",
}


async def _create_test_etf(client, headers) -> dict:
    response = await client.post("/api/investments", json=TEST_ETF, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def _sale_body(investment_id: str, amount, alle: int = 50, ali: int = 50) -> dict:
    return {
        "investmentId": investment_id,
        "saleAmount": amount,
        "salePrice": amount,
        "allePercentage": alle,
        "aliPercentage": ali,
        "saleDate": "2024-02-01",
        "createdBy": "alle",
    }


# === 認證 ===

async def test_viewer_login_without_password(client):
    response = await client.post("/api/auth/login", json={"username": "ali"})

    assert response.status_code == 200
    body = response.json()
    assert body["username"] == "ali"
    assert body["role"] == "viewer"
    assert body["displayName"] == "Ali"
    assert body["accessToken"]
    assert "password" not in body and "hashedPassword" not in body


async def test_admin_login_with_wrong_password(client):
    response = await client.post(
        "/api/auth/login", json={"username": "alle", "password": "nope"}
    )

    assert response.status_code == 401
    assert response.json()["message"]


async def test_login_unknown_user(client):
    response = await client.post("/api/auth/login", json={"username": "mallory"})
    assert response.status_code == 401


async def test_login_missing_username(client):
    response = await client.post("/api/auth/login", json={})

    assert response.status_code == 400
    body = response.json()
    assert body["message"]
    assert body["errors"]


async def test_me_returns_current_user(client, admin_headers):
    response = await client.get("/api/auth/me", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["username"] == "alle"


async def test_me_requires_token(client):
    response = await client.get("/api/auth/me")
    assert response.status_code == 401


# === 讀取 ===

async def test_list_users_hides_passwords(client):
    response = await client.get("/api/users")

    assert response.status_code == 200
    users = response.json()
    assert {u["username"] for u in users} == {"alle", "ali"}
    assert all("hashedPassword" not in u for u in users)


async def test_seeded_investments_are_listed(client):
    response = await client.get("/api/investments")

    assert response.status_code == 200
    names = [i["name"] for i in response.json()]
    assert names == ["Vanguard FTSE All-World", "Apple Inc.", "iShares Core MSCI World"]


async def test_get_unknown_investment(client):
    response = await client.get("/api/investments/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"message": "Investment not found"}


# === 新增投資 ===

async def test_create_investment_scenario(client, admin_headers):
    investment = await _create_test_etf(client, admin_headers)

    assert investment["id"]
    assert Decimal(investment["currentValue"]) == Decimal("1000")
    assert investment["allePercentage"] == 60

    txs = (await client.get("/api/transactions")).json()
    purchase = next(t for t in txs if t["investmentId"] == investment["id"])
    assert purchase["action"] == "Purchase"
    assert Decimal(purchase["amount"]) == Decimal("1000")
    assert purchase["date"] == "2024-01-01"
    assert purchase["userId"] == "alle"


async def test_create_investment_bad_percentages(client, admin_headers):
    body = {**TEST_ETF, "allePercentage": 60, "aliPercentage": 30}

    response = await client.post("/api/investments", json=body, headers=admin_headers)

    assert response.status_code == 400
    assert "100" in response.json()["message"]


async def test_create_investment_invalid_body(client, admin_headers):
    body = {**TEST_ETF, "type": "Tulips", "initialValue": -5}

    response = await client.post("/api/investments", json=body, headers=admin_headers)

    assert response.status_code == 400
    errors = response.json()["errors"]
    assert {tuple(e["loc"])[-1] for e in errors} >= {"type", "initialValue"}


async def test_create_investment_defaults_created_by_to_caller(client, admin_headers):
    body = {k: v for k, v in TEST_ETF.items() if k != "createdBy"}

    response = await client.post("/api/investments", json=body, headers=admin_headers)

    assert response.status_code == 201
    assert response.json()["createdBy"] == "alle"


async def test_viewer_cannot_create_investment(client, viewer_headers):
    response = await client.post("/api/investments", json=TEST_ETF, headers=viewer_headers)
    assert response.status_code == 403


async def test_anonymous_cannot_create_investment(client):
    response = await client.post("/api/investments", json=TEST_ETF)
    assert response.status_code == 401


# === 修改與刪除 ===

async def test_update_investment(client, admin_headers):
    investment = await _create_test_etf(client, admin_headers)

    response = await client.put(
        f"/api/investments/{investment['id']}",
        json={"currentValue": "1100.50", "updatedBy": "alle"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert Decimal(response.json()["currentValue"]) == Decimal("1100.50")
    edit = next(
        t for t in (await client.get("/api/transactions")).json()
        if t["action"] == "Edit"
    )
    assert Decimal(edit["amount"]) == Decimal("1100.50")


async def test_update_single_percentage_breaking_sum(client, admin_headers):
    investment = await _create_test_etf(client, admin_headers)

    response = await client.put(
        f"/api/investments/{investment['id']}",
        json={"aliPercentage": 50},
        headers=admin_headers,
    )

    assert response.status_code == 400


@pytest.mark.parametrize(
    "field",
    ["name", "type", "initialValue", "currentValue",
     "allePercentage", "aliPercentage", "purchaseDate"],
)
async def test_update_rejects_null_for_required_field(client, admin_headers, field):
    investment = await _create_test_etf(client, admin_headers)

    response = await client.put(
        f"/api/investments/{investment['id']}",
        json={field: None},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid data"
    stored = (await client.get(f"/api/investments/{investment['id']}")).json()
    for key in ("name", "type", "currentValue", "allePercentage", "purchaseDate"):
        assert stored[key] == investment[key]
    txs = (await client.get("/api/transactions")).json()
    assert not any(t["action"] == "Edit" for t in txs)


async def test_update_clears_symbol_with_null(client, admin_headers):
    investment = await _create_test_etf(client, admin_headers)

    response = await client.put(
        f"/api/investments/{investment['id']}",
        json={"symbol": None},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["symbol"] is None


async def test_update_cannot_lower_current_value(client, admin_headers):
    investment = await _create_test_etf(client, admin_headers)

    response = await client.put(
        f"/api/investments/{investment['id']}",
        json={"currentValue": 10},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert "sale" in response.json()["message"]
    stored = (await client.get(f"/api/investments/{investment['id']}")).json()
    assert Decimal(stored["currentValue"]) == Decimal("1000")
    txs = (await client.get("/api/transactions")).json()
    assert not any(t["action"] == "Edit" for t in txs)


async def test_update_unknown_investment(client, admin_headers):
    response = await client.put(
        "/api/investments/missing", json={"name": "x"}, headers=admin_headers
    )
    assert response.status_code == 404


async def test_viewer_cannot_update(client, viewer_headers):
    investments = (await client.get("/api/investments")).json()

    response = await client.put(
        f"/api/investments/{investments[0]['id']}",
        json={"name": "Hijacked"},
        headers=viewer_headers,
    )

    assert response.status_code == 403
    stored = (await client.get(f"/api/investments/{investments[0]['id']}")).json()
    assert stored["name"] != "Hijacked"


async def test_delete_investment(client, admin_headers):
    investment = await _create_test_etf(client, admin_headers)

    response = await client.request(
        "DELETE",
        f"/api/investments/{investment['id']}",
        json={"deletedBy": "alle"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["message"]
    assert (await client.get(f"/api/investments/{investment['id']}")).status_code == 404

    deletion = next(
        t for t in (await client.get("/api/transactions")).json()
        if t["action"] == "Deletion"
    )
    assert deletion["investmentName"] == "Test ETF"
    assert Decimal(deletion["amount"]) == Decimal("0")


async def test_delete_without_body(client, admin_headers):
    investment = await _create_test_etf(client, admin_headers)

    response = await client.delete(
        f"/api/investments/{investment['id']}", headers=admin_headers
    )

    assert response.status_code == 200


async def test_delete_unknown_investment_creates_no_transaction(client, admin_headers):
    before = (await client.get("/api/transactions")).json()

    response = await client.delete("/api/investments/missing", headers=admin_headers)

    assert response.status_code == 404
    assert (await client.get("/api/transactions")).json() == before


async def test_viewer_cannot_delete(client, viewer_headers):
    investments = (await client.get("/api/investments")).json()

    response = await client.delete(
        f"/api/investments/{investments[0]['id']}", headers=viewer_headers
    )

    assert response.status_code == 403
    assert len((await client.get("/api/investments")).json()) == len(investments)


# === 賣出 ===

async def test_sale_exceeding_value_is_rejected(client, admin_headers):
    investment = await _create_test_etf(client, admin_headers)

    response = await client.post(
        "/api/sales", json=_sale_body(investment["id"], 1200), headers=admin_headers
    )

    assert response.status_code == 400
    assert "exceeds" in response.json()["message"]


async def test_partial_sale_scenario(client, admin_headers):
    investment = await _create_test_etf(client, admin_headers)

    response = await client.post(
        "/api/sales", json=_sale_body(investment["id"], 400), headers=admin_headers
    )

    assert response.status_code == 201
    sale = response.json()
    assert sale["investmentName"] == "Test ETF"
    assert Decimal(sale["saleAmount"]) == Decimal("400")

    updated = (await client.get(f"/api/investments/{investment['id']}")).json()
    assert Decimal(updated["currentValue"]) == Decimal("600")
    assert (updated["allePercentage"], updated["aliPercentage"]) == (60, 40)

    sale_tx = next(
        t for t in (await client.get("/api/transactions")).json()
        if t["action"] == "Sale"
    )
    assert Decimal(sale_tx["amount"]) == Decimal("400")
    assert sale_tx["date"] == "2024-02-01"

    sales = (await client.get("/api/sales")).json()
    assert [s["id"] for s in sales] == [sale["id"]]
    assert (await client.get(f"/api/sales/{sale['id']}")).status_code == 200


async def test_sale_for_unknown_investment(client, admin_headers):
    response = await client.post(
        "/api/sales", json=_sale_body("missing", 10), headers=admin_headers
    )
    assert response.status_code == 404


async def test_sale_name_comes_from_investment(client, admin_headers):
    investment = await _create_test_etf(client, admin_headers)
    body = {**_sale_body(investment["id"], 100), "investmentName": "Spoofed"}

    response = await client.post("/api/sales", json=body, headers=admin_headers)

    assert response.status_code == 201
    assert response.json()["investmentName"] == "Test ETF"


async def test_sale_bad_percentages(client, admin_headers):
    investment = await _create_test_etf(client, admin_headers)

    response = await client.post(
        "/api/sales",
        json=_sale_body(investment["id"], 100, alle=70, ali=20),
        headers=admin_headers,
    )

    assert response.status_code == 400


async def test_viewer_cannot_sell(client, viewer_headers):
    investments = (await client.get("/api/investments")).json()

    response = await client.post(
        "/api/sales", json=_sale_body(investments[0]["id"], 10), headers=viewer_headers
    )

    assert response.status_code == 403


async def test_get_unknown_sale(client):
    response = await client.get("/api/sales/missing")
    assert response.status_code == 404


# === 排序與總覽 ===

async def test_transactions_sorted_by_date_desc(client):
    dates = [t["date"] for t in (await client.get("/api/transactions")).json()]

    assert dates == sorted(dates, reverse=True)
    assert len(dates) == 3


async def test_summary_splits_value_by_ownership(client):
    response = await client.get("/api/summary")

    assert response.status_code == 200
    summary = response.json()
    assert summary["investmentCount"] == 3
    assert Decimal(summary["totalInitial"]) == Decimal("20000.00")
    assert Decimal(summary["totalCurrent"]) == Decimal("22589.34")
    alle = Decimal(summary["alle"]["currentValue"])
    ali = Decimal(summary["ali"]["currentValue"])
    assert alle + ali == Decimal("22589.34")


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
