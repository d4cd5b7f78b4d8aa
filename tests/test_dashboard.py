from datetime import timedelta
from decimal import Decimal

from schemas.common import today_ist


def test_empty_dashboard(client):
    body = client.get("/dashboard/summary").json()
    assert body["total_lrs"] == 0
    assert Decimal(body["total_freight"]) == 0
    assert body["total_freight_display"] == "₹ 0.00"
    assert body["status_counts"] == {
        "Booked": 0, "In Transit": 0, "Out for Delivery": 0, "Delivered": 0, "Cancelled": 0,
    }
    assert len(body["last_7_days"]) == 7
    assert body["recent_lrs"] == []


def test_dashboard_summary(client, make_lr):
    today = today_ist()
    make_lr(lr_no="LR-1", date=today.isoformat(), freight=1000)
    make_lr(lr_no="LR-2", date=(today - timedelta(days=2)).isoformat(), freight=500,
            consignor={"name": " Acme Traders "})
    delivered = make_lr(lr_no="LR-3", date=(today - timedelta(days=6)).isoformat(), freight=250,
                        consignor={"name": "Bharat Steel"})
    make_lr(lr_no="LR-4", date=(today - timedelta(days=7)).isoformat(), freight=100, consignor={"name": ""})
    client.patch(f"/lorry-receipts/{delivered['id']}/status", json={"status": "Delivered"})

    body = client.get("/dashboard/summary").json()
    assert body["total_lrs"] == 4
    assert Decimal(body["total_freight"]) == Decimal(1850)
    assert body["total_freight_display"] == "₹ 1,850.00"
    assert body["unique_consignors"] == 2
    assert body["pods_pending"] == 1
    assert body["status_counts"]["Booked"] == 3
    assert body["status_counts"]["Delivered"] == 1

    chart = body["last_7_days"]
    assert [day["date"] for day in chart] == [(today - timedelta(days=d)).isoformat() for d in range(6, -1, -1)]
    assert chart[-1]["label"] == today.strftime("%a")
    assert [Decimal(day["freight"]) for day in chart] == [
        Decimal(250), 0, 0, 0, Decimal(500), 0, Decimal(1000),
    ]

    assert [lr["lr_no"] for lr in body["recent_lrs"]] == ["LR-1", "LR-2", "LR-3", "LR-4"]


def test_recent_lrs_are_capped(client, make_lr):
    for n in range(7):
        make_lr(lr_no=f"LR-{n}", date="2024-04-01")
    recent = client.get("/dashboard/summary").json()["recent_lrs"]
    assert [lr["lr_no"] for lr in recent] == ["LR-6", "LR-5", "LR-4", "LR-3", "LR-2"]


def test_dashboard_is_per_tenant(client, make_lr):
    make_lr()
    body = client.get("/dashboard/summary", headers={"X-Tenant-ID": "tenant-b"}).json()
    assert body["total_lrs"] == 0
