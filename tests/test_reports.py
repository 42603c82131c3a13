import pytest

from conftest import register

YEAR = 2024


def record(client, headers, family, kind, amount, category, day):
    payload = {
        "family_id": family["id"],
        "description": f"{category} {day}",
        "amount": amount,
        "date": day,
        "category": category,
    }
    if kind == "expenses":
        payload["responsibility"] = "FAMILY"
    r = client.post(f"/{kind}", json=payload, headers=headers)
    assert r.status_code == 201, r.text


@pytest.fixture
def ledger(client, head, family):
    record(client, head, family, "expenses", "30.00", "GROCERIES", "2024-03-02")
    record(client, head, family, "expenses", "45.00", "GROCERIES", "2024-03-20")
    record(client, head, family, "expenses", "25.00", "TRANSPORT", "2024-03-11")
    record(client, head, family, "expenses", "99.00", "LEISURE", "2024-04-01")
    record(client, head, family, "incomes", "1500.00", "SALARY", "2024-03-27")
    record(client, head, family, "incomes", "200.00", "INTEREST", "2023-12-31")
    return family


def test_category_statistics(client, head, ledger):
    r = client.get(f"/families/{ledger['id']}/reports/categories",
                   params={"kind": "EXPENSE", "month": 3, "year": YEAR}, headers=head)
    assert r.status_code == 200
    stats = r.json()
    assert [s["category"] for s in stats] == ["GROCERIES", "TRANSPORT"]
    groceries, transport = stats
    assert groceries["total"] == 75.0
    assert groceries["count"] == 2
    assert groceries["percentage"] == pytest.approx(75.0)
    assert transport["percentage"] == pytest.approx(25.0)
    assert groceries["color"] == "#10b981"


def test_category_statistics_empty_month(client, head, ledger):
    r = client.get(f"/families/{ledger['id']}/reports/categories",
                   params={"kind": "INCOME", "month": 1, "year": YEAR}, headers=head)
    assert r.json() == []


def test_category_statistics_bad_month(client, head, ledger):
    r = client.get(f"/families/{ledger['id']}/reports/categories",
                   params={"month": 0, "year": YEAR}, headers=head)
    assert r.status_code == 400


def test_monthly_balance(client, head, ledger):
    r = client.get(f"/families/{ledger['id']}/reports/monthly", params={"year": YEAR}, headers=head)
    months = r.json()
    assert [m["month"] for m in months] == list(range(1, 13))
    march, april = months[2], months[3]
    assert march == {"month": 3, "year": YEAR, "total_income": 1500.0, "total_expenses": 100.0, "balance": 1400.0}
    assert april["balance"] == -99.0
    assert months[0]["total_income"] == 0.0


def test_total_balance(client, head, ledger):
    r = client.get(f"/families/{ledger['id']}/reports/balance", headers=head)
    body = r.json()
    assert body["total_income"] == 1700.0
    assert body["total_expenses"] == 199.0
    assert body["balance"] == 1501.0


def test_reports_require_membership(client, ledger):
    outsider = register(client, "outsider@example.com")
    r = client.get(f"/families/{ledger['id']}/reports/balance", headers=outsider)
    assert r.status_code == 403
