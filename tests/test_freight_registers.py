from datetime import date
from decimal import Decimal

import pytest

TENANT = "tenant-a"


def _hiring(**extra):
    payload = {
        "date": "2024-03-15",
        "lorry_no": "MH12AB1234",
        "gr_no": "GR-11",
        "driver_no": "9876543210",
        "freight": 10000,
        "other_expenses": 500,
        "advances": [{"amount": 3000, "date": "2024-03-15", "notes": "Cash"}],
    }
    payload.update(extra)
    return payload


def _booking(**extra):
    payload = {
        "date": "2024-03-16",
        "party_name": "Acme Traders",
        "lorry_no": "KA01XY9999",
        "freight": 8000,
        "other_expenses": 0,
        "advances": [],
    }
    payload.update(extra)
    return payload


REGISTERS = [
    ("/vehicle-hirings/", _hiring),
    ("/booking-registers/", _booking),
]


def test_create_hiring_derives_balances(client):
    resp = client.post("/vehicle-hirings/", json=_hiring())
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert Decimal(body["advance"]) == Decimal(3000)
    assert Decimal(body["balance"]) == Decimal(7000)
    assert Decimal(body["total_balance"]) == Decimal(7500)
    assert len(body["advances"]) == 1
    assert Decimal(body["advances"][0]["amount"]) == Decimal(3000)
    assert body["advances"][0]["date"] == "2024-03-15"
    assert body["advances"][0]["notes"] == "Cash"


def test_client_supplied_derived_fields_are_ignored(client):
    resp = client.post("/vehicle-hirings/", json=_hiring(advance=999999, balance=1, total_balance=2))
    body = resp.json()
    assert Decimal(body["advance"]) == Decimal(3000)
    assert Decimal(body["balance"]) == Decimal(7000)


def test_create_rejects_invalid_advance(client):
    resp = client.post("/vehicle-hirings/", json=_hiring(advances=[{"amount": 0}]))
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Enter a valid amount"
    assert client.get("/vehicle-hirings/").json() == []


@pytest.mark.parametrize("path, build", REGISTERS)
def test_add_and_remove_advances(client, path, build):
    record = client.post(path, json=build(advances=[])).json()
    freight = Decimal(record["freight"])

    resp = client.post(f"{path}{record['id']}/advances", json={"amount": "1500", "date": "2024-03-20"})
    assert resp.status_code == 200
    resp = client.post(f"{path}{record['id']}/advances", json={"amount": 500, "notes": "Fuel"})
    body = resp.json()
    assert [Decimal(e["amount"]) for e in body["advances"]] == [Decimal(1500), Decimal(500)]
    assert body["advances"][1]["notes"] == "Fuel"
    assert body["advances"][1]["date"] is not None
    assert Decimal(body["advance"]) == Decimal(2000)
    assert Decimal(body["balance"]) == freight - 2000

    body = client.delete(f"{path}{record['id']}/advances/0").json()
    assert [Decimal(e["amount"]) for e in body["advances"]] == [Decimal(500)]
    assert Decimal(body["advance"]) == Decimal(500)
    assert Decimal(body["balance"]) == freight - 500


@pytest.mark.parametrize("path, build", REGISTERS)
@pytest.mark.parametrize("amount", [0, -100, "", "abc", None])
def test_invalid_advance_leaves_ledger_untouched(client, path, build, amount):
    record = client.post(path, json=build(advances=[{"amount": 100}])).json()
    resp = client.post(f"{path}{record['id']}/advances", json={"amount": amount})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Enter a valid amount"

    body = client.get(f"{path}{record['id']}").json()
    assert len(body["advances"]) == 1
    assert Decimal(body["advance"]) == Decimal(100)


def test_remove_advance_out_of_range_is_noop(client):
    record = client.post("/vehicle-hirings/", json=_hiring()).json()
    for index in (5, -1):
        resp = client.delete(f"/vehicle-hirings/{record['id']}/advances/{index}")
        assert resp.status_code == 200
        assert len(resp.json()["advances"]) == 1
        assert Decimal(resp.json()["advance"]) == Decimal(3000)


def test_update_recomputes_balances(client):
    record = client.post("/vehicle-hirings/", json=_hiring()).json()
    resp = client.patch(f"/vehicle-hirings/{record['id']}", json={"freight": 12000, "other_expenses": 0, "balance": 5})
    body = resp.json()
    assert Decimal(body["balance"]) == Decimal(9000)
    assert Decimal(body["total_balance"]) == Decimal(9000)


def test_legacy_scalar_advance_is_upgraded_on_read(client, db_session):
    from models.vehicle_hirings import VehicleHiring

    legacy = VehicleHiring(
        tenant_id=TENANT, date=date(2023, 11, 1), lorry_no="OLD-1", freight=Decimal(5000),
        advance=Decimal(1200), advances=None, balance=Decimal(0), other_expenses=Decimal(300),
        total_balance=Decimal(0),
    )
    db_session.add(legacy)
    db_session.commit()
    legacy_id = legacy.id

    body = client.get(f"/vehicle-hirings/{legacy_id}").json()
    assert len(body["advances"]) == 1
    assert Decimal(body["advances"][0]["amount"]) == Decimal(1200)
    assert body["advances"][0]["date"] == "2023-11-01"
    assert body["advances"][0]["notes"] == "Legacy Advance"
    assert Decimal(body["balance"]) == Decimal(3800)
    assert Decimal(body["total_balance"]) == Decimal(4100)

    # Reading does not write the upgrade back
    db_session.expire_all()
    stored = db_session.query(VehicleHiring).filter(VehicleHiring.id == legacy_id).first()
    assert stored.advances is None


def test_stale_stored_balance_is_never_trusted(client, db_session):
    from models.booking_registers import BookingRegister

    record = client.post("/booking-registers/", json=_booking(advances=[{"amount": 2000}])).json()
    db_session.query(BookingRegister).filter(BookingRegister.id == record["id"]).update(
        {"balance": Decimal(1), "total_balance": Decimal(1), "advance": Decimal(1)}
    )
    db_session.commit()

    body = client.get(f"/booking-registers/{record['id']}").json()
    assert Decimal(body["advance"]) == Decimal(2000)
    assert Decimal(body["balance"]) == Decimal(6000)


def test_list_search_and_payment_filter(client):
    client.post("/vehicle-hirings/", json=_hiring(lorry_no="AAA111", gr_no="GR-1"))
    client.post("/vehicle-hirings/", json=_hiring(lorry_no="BBB222", gr_no="GR-2", payment_status="Completed"))
    assert [h["lorry_no"] for h in client.get("/vehicle-hirings/", params={"search": "bbb"}).json()] == ["BBB222"]
    pending = client.get("/vehicle-hirings/", params={"payment_status": "Pending"}).json()
    assert [h["lorry_no"] for h in pending] == ["AAA111"]


def test_register_summaries(client):
    client.post("/vehicle-hirings/", json=_hiring())
    client.post("/vehicle-hirings/", json=_hiring(payment_status="Completed", pod_status="Completed"))
    summary = client.get("/vehicle-hirings/summary").json()
    assert summary["total_records"] == 2
    assert summary["pending_payments"] == 1
    assert summary["pending_pods"] == 1
    assert Decimal(summary["total_freight"]) == Decimal(20000)
    assert Decimal(summary["outstanding_balance"]) == Decimal(7500)

    client.post("/booking-registers/", json=_booking())
    summary = client.get("/booking-registers/summary").json()
    assert summary["total_records"] == 1
    assert summary["pending_pods"] is None
    assert Decimal(summary["outstanding_balance"]) == Decimal(8000)


def test_delete_register_entry(client):
    record = client.post("/booking-registers/", json=_booking()).json()
    assert client.delete(f"/booking-registers/{record['id']}").status_code == 204
    assert client.get(f"/booking-registers/{record['id']}").status_code == 404
    assert client.get("/booking-registers/summary").json()["total_records"] == 0


@pytest.mark.parametrize("path, build", REGISTERS)
def test_null_amounts_in_update_count_as_zero(client, path, build):
    record = client.post(path, json=build(advances=[{"amount": 100}])).json()
    resp = client.patch(f"{path}{record['id']}", json={"freight": None, "other_expenses": "", "date": None})
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert Decimal(body["freight"]) == 0
    assert Decimal(body["other_expenses"]) == 0
    assert Decimal(body["balance"]) == Decimal(-100)
    assert body["date"] == record["date"]


def test_malformed_stored_ledger_still_loads(client, db_session):
    from models.vehicle_hirings import VehicleHiring

    damaged = VehicleHiring(
        tenant_id=TENANT, date=date(2024, 1, 10), lorry_no="DMG-1", freight=Decimal(1000),
        advances=[
            {"amount": 100, "date": "2024-01-10", "notes": "Cash"},
            "junk",
            {"amount": "x", "date": "not-a-date"},
        ],
        advance=Decimal(0), balance=Decimal(0), other_expenses=Decimal(0), total_balance=Decimal(0),
    )
    db_session.add(damaged)
    db_session.commit()

    resp = client.get(f"/vehicle-hirings/{damaged.id}")
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert [Decimal(e["amount"]) for e in body["advances"]] == [Decimal(100), 0]
    assert body["advances"][0]["date"] == "2024-01-10"
    assert body["advances"][1]["date"] is None
    assert Decimal(body["balance"]) == Decimal(900)

    assert client.get("/vehicle-hirings/").status_code == 200
    assert client.get("/vehicle-hirings/summary").status_code == 200
    assert client.get("/reports/vehicle-hirings/excel").status_code == 200
