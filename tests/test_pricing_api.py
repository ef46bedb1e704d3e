def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_price_item(client):
    r = client.post(
        "/api/pricing/item",
        json={"garmentType": "men-half-sleeves-t-shirt", "color": "white", "printStyle": "centered", "size": "M"},
    )
    assert r.status_code == 200
    body = r.json()
    assert body["unitPrice"] == 381.0
    assert body["display"] == "₹381"
    assert body["breakdown"] == {"basePrice": 381.0, "sizeSurcharge": 0.0, "total": 381.0}
    assert body["weightClass"] == "light"
    assert "white" in body["availableColors"]


def test_price_item_fills_defaults(client):
    r = client.post("/api/pricing/item", json={})
    assert r.status_code == 200
    body = r.json()
    assert (body["garmentType"], body["color"], body["printStyle"], body["size"]) == ("t-shirt", "white", "centered", "M")
    assert body["unitPrice"] == 381.0


def test_price_item_rejects_unknown_fields(client):
    r = client.post("/api/pricing/item", json={"garment": "hoodie"})
    assert r.status_code == 422


def test_quote_hoodie(client):
    r = client.post(
        "/api/pricing/quote",
        json={"items": [{"garmentType": "unisex-hoodies", "color": "black", "printStyle": "centered", "size": "M", "quantity": 1}]},
    )
    assert r.status_code == 200
    body = r.json()
    assert body["currency"] == "INR"
    assert body["totals"] == {"subtotal": 897.0, "tax": 44.85, "shipping": 108.0, "delivery": 20.0, "total": 1069.85}
    assert body["weightUnits"] == 1.5
    assert body["promo"] is None
    assert body["discount"] == 0.0
    assert body["payableTotal"] == 1069.85
    assert body["amountMinorUnits"] == 106985

    (line,) = body["lines"]
    assert line["unitPrice"] == 897.0
    assert line["lineTax"] == 44.85
    assert line["taxRate"] == 0.05
    assert line["weightClass"] == "heavy"


def test_quote_with_promo(client):
    r = client.post(
        "/api/pricing/quote",
        json={"items": [{"garmentType": "unisex-hoodies", "color": "black"}], "promoCode": "welcome10"},
    )
    assert r.status_code == 200
    body = r.json()
    assert body["promo"]["valid"] is True
    assert body["promo"]["code"] == "WELCOME10"
    assert body["discount"] == 107.0
    assert body["payableTotal"] == 962.85
    assert body["amountMinorUnits"] == 96285


def test_quote_with_unknown_promo_keeps_total(client):
    r = client.post("/api/pricing/quote", json={"items": [{}], "promoCode": "NOPE"})
    assert r.status_code == 200
    body = r.json()
    assert body["promo"]["valid"] is False
    assert body["discount"] == 0.0
    assert body["payableTotal"] == body["totals"]["total"] == 474.05


def test_quote_validation(client):
    assert client.post("/api/pricing/quote", json={"items": []}).status_code == 422
    assert client.post("/api/pricing/quote", json={"items": [{"quantity": 0}]}).status_code == 422
    assert client.post("/api/pricing/quote", json={}).status_code == 422


def test_validate_promo(client):
    r = client.post("/api/promo-codes/validate", json={"code": "SAVE100", "orderTotal": 474.05})
    assert r.status_code == 200
    body = r.json()
    assert body["valid"] is True
    assert body["discountAmount"] == 100.0
    assert body["discountType"] == "fixed"
    assert body["message"] == "Promo code applied! You saved ₹100"

    r = client.post("/api/promo-codes/validate", json={"code": "SAVE100", "orderTotal": 0})
    assert r.status_code == 422


def test_catalog_garments(client):
    r = client.get("/api/catalog/garments")
    assert r.status_code == 200
    body = r.json()
    assert body["currency"] == "INR"
    assert [g["garmentType"] for g in body["categories"]["womens"]] == [
        "women-half-sleeves-t-shirt",
        "women-crop-top",
        "women-cropped-hoodies",
        "women-t-shirt-dress",
    ]
    hoodie = next(g for g in body["categories"]["unisex"] if g["garmentType"] == "unisex-hoodies")
    assert hoodie == {"garmentType": "unisex-hoodies", "basePrice": 897.0, "weightClass": "heavy"}


def test_garment_colors(client):
    r = client.get("/api/catalog/garments/men-acid-wash-t-shirt/colors")
    assert r.json() == {"garmentType": "men-acid-wash-t-shirt", "colors": ["maroon", "black", "dark-blue", "olive-green"]}

    r = client.get("/api/catalog/garments/unknown/colors")
    assert r.json()["colors"] == ["white", "black"]


def test_metrics_after_quote(client):
    client.post(
        "/api/pricing/quote",
        json={"items": [{"garmentType": "unisex-hoodies"}], "promoCode": "WELCOME10"},
    )
    r = client.get("/metrics")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/plain")
    text = r.text
    assert 'apparel_quote_total{result="success"}' in text
    assert 'apparel_promo_validation_total{result="applied"}' in text
    assert 'apparel_api_latency_seconds_count{route="/api/pricing/quote"}' in text
    assert "apparel_order_total_inr_count" in text
