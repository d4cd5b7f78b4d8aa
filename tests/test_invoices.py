from decimal import Decimal


def _preview(client, ids, tax_type="intra"):
    return client.post("/invoices/preview", json={"lorry_receipt_ids": ids, "tax_type": tax_type})


def test_preview_intra_state(client, make_lr):
    lr = make_lr(freight=1000)
    resp = _preview(client, [lr["id"]])
    assert resp.status_code == 200
    body = resp.json()
    assert Decimal(body["total_amount"]) == Decimal(1000)
    assert Decimal(body["cgst"]) == Decimal(25)
    assert Decimal(body["sgst"]) == Decimal(25)
    assert Decimal(body["igst"]) == 0
    assert Decimal(body["net_amount"]) == Decimal(1050)
    assert body["amount_in_words"] == "One Thousand Fifty"
    assert body["billed_to"]["name"] == "Acme Traders"
    assert len(body["lines"]) == 1


def test_preview_inter_state(client, make_lr):
    lr = make_lr(freight=1000)
    body = _preview(client, [lr["id"]], "inter").json()
    assert Decimal(body["igst"]) == Decimal(50)
    assert Decimal(body["cgst"]) == 0
    assert Decimal(body["net_amount"]) == Decimal(1050)


def test_preview_sums_lines_and_charges(client, make_lr):
    first = make_lr(lr_no="LR-1", freight=1000, charges={"hamali": 100})
    second = make_lr(lr_no="LR-2", freight=500, charges={"st_charge": 20, "collection_charge": 30})
    body = _preview(client, [first["id"], second["id"]]).json()
    assert Decimal(body["total_amount"]) == Decimal(1650)
    assert [Decimal(line["line_total"]) for line in body["lines"]] == [Decimal(1100), Decimal(550)]
    assert Decimal(body["net_amount"]) == Decimal("1732.5")
    # Words are for the net amount rounded to whole rupees
    assert body["amount_in_words"] == "One Thousand Seven Hundred Thirty Three"


def test_preview_suggests_bill_number(client, make_lr):
    plain = make_lr(lr_no="LR-1")
    body = _preview(client, [plain["id"]]).json()
    assert body["suggested_bill_no"].startswith("INV-")
    assert body["suggested_bill_no"].endswith("-0001")

    with_invoice = make_lr(lr_no="LR-2", invoice_no="CUST-77")
    assert _preview(client, [with_invoice["id"]]).json()["suggested_bill_no"] == "CUST-77"


def test_preview_prefers_billing_party(client, make_lr):
    lr = make_lr(billing_to={"name": "Head Office Ltd", "address": "Delhi", "gst": "07BBBBB1111B1Z1"})
    assert _preview(client, [lr["id"]]).json()["billed_to"]["name"] == "Head Office Ltd"


def test_preview_validation(client, make_lr):
    assert _preview(client, []).status_code == 400
    assert _preview(client, [999]).status_code == 404
    lr = make_lr()
    assert _preview(client, [lr["id"]], "export").status_code == 422


def test_create_invoice_links_and_stamps_lrs(client, make_lr):
    first = make_lr(lr_no="LR-1", freight=1000)
    second = make_lr(lr_no="LR-2", freight=2000)
    resp = client.post("/invoices/", json={
        "bill_no": "BILL-100",
        "bill_date": "2024-04-10",
        "tax_type": "inter",
        "lorry_receipt_ids": [first["id"], second["id"]],
    })
    assert resp.status_code == 201, resp.text
    invoice = resp.json()
    assert Decimal(invoice["net_amount"]) == Decimal(3150)
    assert Decimal(invoice["igst"]) == Decimal(150)
    assert invoice["amount_in_words"] == "Three Thousand One Hundred Fifty"
    assert [line["lr_no"] for line in invoice["lines"]] == ["LR-1", "LR-2"]

    lr = client.get(f"/lorry-receipts/{first['id']}").json()
    assert lr["invoice_id"] == invoice["id"]
    assert lr["invoice_no"] == "BILL-100"
    assert lr["invoice_date"] == "2024-04-10"

    assert client.get(f"/invoices/{invoice['id']}").json()["bill_no"] == "BILL-100"
    assert [i["bill_no"] for i in client.get("/invoices/").json()] == ["BILL-100"]


def test_create_invoice_rejects_duplicates(client, make_lr):
    first = make_lr(lr_no="LR-1")
    second = make_lr(lr_no="LR-2")
    payload = {"bill_no": "BILL-1", "lorry_receipt_ids": [first["id"]]}
    assert client.post("/invoices/", json=payload).status_code == 201

    # Same bill number
    resp = client.post("/invoices/", json={"bill_no": "BILL-1", "lorry_receipt_ids": [second["id"]]})
    assert resp.status_code == 400
    # LR already billed
    resp = client.post("/invoices/", json={"bill_no": "BILL-2", "lorry_receipt_ids": [first["id"]]})
    assert resp.status_code == 400
    # Unknown LR
    resp = client.post("/invoices/", json={"bill_no": "BILL-3", "lorry_receipt_ids": [second["id"], 999]})
    assert resp.status_code == 404


def test_invoice_totals_are_frozen_at_creation(client, make_lr):
    lr = make_lr(freight=1000)
    invoice = client.post("/invoices/", json={"bill_no": "B-1", "lorry_receipt_ids": [lr["id"]]}).json()
    client.patch(f"/lorry-receipts/{lr['id']}", json={"freight": 5000})
    assert Decimal(client.get(f"/invoices/{invoice['id']}").json()["net_amount"]) == Decimal(1050)


def test_delete_invoice_unlinks_lrs(client, make_lr):
    lr = make_lr()
    invoice = client.post("/invoices/", json={"bill_no": "B-9", "lorry_receipt_ids": [lr["id"]]}).json()
    assert client.delete(f"/lorry-receipts/{lr['id']}").status_code == 409

    assert client.delete(f"/invoices/{invoice['id']}").status_code == 204
    assert client.get(f"/invoices/{invoice['id']}").status_code == 404
    assert client.get(f"/lorry-receipts/{lr['id']}").json()["invoice_id"] is None


def test_invoice_pdf(client, make_lr):
    client.put("/company-profile/", json={
        "name": "Shree Logistics",
        "gstn": "27CCCCC2222C1Z2",
        "bank_details": {"name": "State Bank", "branch": "Pune", "account_no": "1234", "ifsc_code": "SBIN0000001"},
    })
    lr = make_lr()
    invoice = client.post("/invoices/", json={"bill_no": "B-5", "lorry_receipt_ids": [lr["id"]]}).json()

    resp = client.get(f"/invoices/{invoice['id']}/pdf")
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/pdf"
    assert resp.content.startswith(b"%PDF")
    assert "Bill-B-5-Acme.pdf" in resp.headers["content-disposition"]


def test_deleted_invoice_number_can_be_billed_again(client, make_lr):
    lr = make_lr()
    invoice = client.post("/invoices/", json={"bill_no": "B-1", "lorry_receipt_ids": [lr["id"]]}).json()
    assert client.delete(f"/invoices/{invoice['id']}").status_code == 204

    preview = _preview(client, [lr["id"]]).json()
    assert preview["suggested_bill_no"] == "B-1"
    resp = client.post("/invoices/", json={"bill_no": preview["suggested_bill_no"], "lorry_receipt_ids": [lr["id"]]})
    assert resp.status_code == 201, resp.text
    assert client.get(f"/lorry-receipts/{lr['id']}").json()["invoice_id"] == resp.json()["id"]


def test_saved_totals_match_preview_to_the_paisa(client, make_lr):
    lr = make_lr(freight="100.01")
    preview = _preview(client, [lr["id"]]).json()
    assert Decimal(preview["cgst"]) == Decimal("2.50025")

    invoice = client.post("/invoices/", json={"bill_no": "B-2", "lorry_receipt_ids": [lr["id"]]}).json()
    saved = client.get(f"/invoices/{invoice['id']}").json()
    for field in ("total_amount", "cgst", "sgst", "net_amount"):
        assert Decimal(saved[field]) == Decimal(preview[field])
    assert Decimal(saved["net_amount"]) == Decimal("105.0105")
