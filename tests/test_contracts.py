from datetime import date, timedelta

import pytest

from homeledger.core.config import settings


@pytest.fixture
def home(client, head, family):
    r = client.post("/dwellings/", headers=head, json={
        "family_id": family["id"],
        "name": "Casa",
        "address": "Via Verdi 3",
        "city": "Bologna",
        "postal_code": "40121",
        "province": "BO",
    })
    assert r.status_code == 201, r.text
    return r.json()


def contract(home, **overrides):
    payload = {
        "dwelling_id": home["id"],
        "utility_type": "ELECTRICITY",
        "provider": "Enel",
        "tariff_plan": "Luce Flex",
        "start_date": "2024-01-01",
        "duration_days": 365,
        "periodic_cost": "75.50",
        "periodicity": "BIMONTHLY",
    }
    payload.update(overrides)
    return payload


def test_create_contract_defaults_due_date(client, head, home):
    r = client.post("/contracts/", json=contract(home), headers=head)
    assert r.status_code == 201
    body = r.json()
    assert body["payment_due_date"] == "2024-12-31"
    assert body["periodic_cost"] == 75.5
    assert body["expiring_soon"] is False


def test_create_contract_explicit_due_date(client, head, home):
    due = (date.today() + timedelta(days=5)).isoformat()
    body = client.post("/contracts/", json=contract(home, payment_due_date=due), headers=head).json()
    assert body["payment_due_date"] == due
    assert body["expiring_soon"] is True


def test_create_contract_validation(client, head, home):
    for bad in [{"duration_days": 0}, {"duration_days": 36501}, {"periodic_cost": "0"},
                {"provider": "E"}, {"utility_type": "STEAM"}, {"periodicity": "WEEKLY"}]:
        assert client.post("/contracts/", json=contract(home, **bad), headers=head).status_code == 422, bad


def test_create_contract_missing_dwelling(client, head, home):
    r = client.post("/contracts/", json=contract(home, dwelling_id="missing"), headers=head)
    assert r.status_code == 404


def test_member_views_but_cannot_manage(client, head, home, member):
    assert client.post("/contracts/", json=contract(home), headers=member).status_code == 403
    created = client.post("/contracts/", json=contract(home), headers=head).json()
    assert client.get(f"/contracts/{created['id']}", headers=member).status_code == 200
    assert client.get(f"/dwellings/{home['id']}/contracts", headers=member).status_code == 200
    assert client.patch(f"/contracts/{created['id']}", json={"provider": "A2A"}, headers=member).status_code == 403
    assert client.delete(f"/contracts/{created['id']}", headers=member).status_code == 403


def test_update_contract_recomputes_due_date(client, worker, home):
    created = client.post("/contracts/", json=contract(home), headers=worker).json()
    r = client.patch(f"/contracts/{created['id']}", json={"duration_days": 30}, headers=worker)
    assert r.status_code == 200
    assert r.json()["payment_due_date"] == "2024-01-31"

    r = client.patch(f"/contracts/{created['id']}", json={"payment_due_date": "2024-02-15"}, headers=worker)
    assert r.json()["payment_due_date"] == "2024-02-15"


def test_delete_contract(client, head, home):
    created = client.post("/contracts/", json=contract(home), headers=head).json()
    assert client.delete(f"/contracts/{created['id']}", headers=head).status_code == 204
    assert client.get(f"/contracts/{created['id']}", headers=head).status_code == 404


def test_deleting_dwelling_removes_contracts(client, head, family, home):
    client.post("/contracts/", json=contract(home), headers=head)
    client.delete(f"/dwellings/{home['id']}", headers=head)
    assert client.get(f"/contracts/family/{family['id']}", headers=head).json() == []


def test_expiring_contracts(client, head, family, home):
    today = date.today()
    soon = client.post("/contracts/", headers=head,
                       json=contract(home, payment_due_date=(today + timedelta(days=10)).isoformat())).json()
    client.post("/contracts/", headers=head,
                json=contract(home, payment_due_date=(today + timedelta(days=90)).isoformat()))
    client.post("/contracts/", headers=head,
                json=contract(home, payment_due_date=(today - timedelta(days=1)).isoformat()))

    r = client.get(f"/contracts/family/{family['id']}/expiring", headers=head)
    assert [c["id"] for c in r.json()] == [soon["id"]]
    r = client.get(f"/contracts/family/{family['id']}/expiring", params={"days": 120}, headers=head)
    assert len(r.json()) == 2
    assert len(client.get(f"/contracts/family/{family['id']}", headers=head).json()) == 3


def test_upload_contract_pdf(client, head, home, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
    created = client.post("/contracts/", json=contract(home), headers=head).json()
    url = f"/contracts/{created['id']}/document"

    r = client.post(url, files={"file": ("bolletta luce.pdf", b"%PDF-1.4 test", "application/pdf")}, headers=head)
    assert r.status_code == 200
    path = r.json()["file_path"]
    assert path.startswith("contracts/contract_")
    assert path.endswith("_bolletta_luce.pdf")
    assert (tmp_path / path).read_bytes() == b"%PDF-1.4 test"

    r = client.post(url, files={"file": ("notes.txt", b"hello", "text/plain")}, headers=head)
    assert r.status_code == 400


def test_upload_contract_pdf_size_limit(client, head, home, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
    monkeypatch.setattr(settings, "MAX_UPLOAD_MB", 1)
    created = client.post("/contracts/", json=contract(home), headers=head).json()
    too_big = b"0" * (1024 * 1024 + 1)
    r = client.post(f"/contracts/{created['id']}/document",
                    files={"file": ("big.pdf", too_big, "application/pdf")}, headers=head)
    assert r.status_code == 400
    assert list(tmp_path.iterdir()) == []


def test_update_contract_validation(client, head, home):
    created = client.post("/contracts/", json=contract(home), headers=head).json()
    for bad in [{"periodic_cost": "0"}, {"periodic_cost": "-5"}, {"periodic_cost": "1.234"},
                {"duration_days": 0}, {"provider": "E"}]:
        r = client.patch(f"/contracts/{created['id']}", json=bad, headers=head)
        assert r.status_code == 422, bad


def test_update_contract_ignores_null_fields(client, head, home):
    created = client.post("/contracts/", json=contract(home), headers=head).json()
    r = client.patch(f"/contracts/{created['id']}", json={"provider": None, "tariff_plan": "Luce Fissa"}, headers=head)
    assert r.status_code == 200
    assert r.json()["provider"] == "Enel"
    assert r.json()["tariff_plan"] == "Luce Fissa"


def upload(client, headers, contract_id, name="bolletta.pdf", body=b"%PDF-1.4 test"):
    r = client.post(f"/contracts/{contract_id}/document",
                    files={"file": (name, body, "application/pdf")}, headers=headers)
    assert r.status_code == 200, r.text
    return r.json()["file_path"]


def test_upload_replaces_previous_document(client, head, home, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
    created = client.post("/contracts/", json=contract(home), headers=head).json()
    first = upload(client, head, created["id"], "first.pdf", b"%PDF first")
    second = upload(client, head, created["id"], "second.pdf", b"%PDF second")

    assert first != second
    assert not (tmp_path / first).exists()
    assert [p.name for p in (tmp_path / "contracts").iterdir()] == [second.split("/")[-1]]
    assert (tmp_path / second).read_bytes() == b"%PDF second"


def test_upload_forces_pdf_extension(client, head, home, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
    created = client.post("/contracts/", json=contract(home), headers=head).json()
    path = upload(client, head, created["id"], name="scan.exe")
    assert path.endswith("_scan.pdf")


def test_deleting_contract_removes_document(client, head, home, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
    created = client.post("/contracts/", json=contract(home), headers=head).json()
    path = upload(client, head, created["id"])
    assert client.delete(f"/contracts/{created['id']}", headers=head).status_code == 204
    assert not (tmp_path / path).exists()


def test_deleting_dwelling_removes_documents(client, head, home, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
    first = client.post("/contracts/", json=contract(home), headers=head).json()
    second = client.post("/contracts/", json=contract(home, utility_type="GAS"), headers=head).json()
    paths = [upload(client, head, first["id"]), upload(client, head, second["id"])]
    assert client.delete(f"/dwellings/{home['id']}", headers=head).status_code == 204
    assert not any((tmp_path / p).exists() for p in paths)


def test_deleting_family_removes_documents(client, head, family, home, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
    created = client.post("/contracts/", json=contract(home), headers=head).json()
    path = upload(client, head, created["id"])
    assert client.delete(f"/families/{family['id']}", headers=head).status_code == 204
    assert not (tmp_path / path).exists()
