from decimal import Decimal


def test_product_crud(client):
    r = client.post("/v1/products", json={"name": "Farine T55"})
    assert r.status_code == 200
    pid = r.json()["id"]

    assert client.get(f"/v1/products/{pid}").json()["name"] == "Farine T55"

    r = client.put(f"/v1/products/{pid}", json={"name": "Farine T65"})
    assert r.json()["name"] == "Farine T65"
    assert [p["name"] for p in client.get("/v1/products").json()] == ["Farine T65"]

    assert client.delete(f"/v1/products/{pid}").json() == {"id": pid, "deleted": True}
    assert client.get(f"/v1/products/{pid}").status_code == 404


def test_product_name_is_required(client):
    assert client.post("/v1/products", json={"name": ""}).status_code == 422


def test_product_with_lots_cannot_be_deleted(client):
    pid = client.post("/v1/products", json={"name": "P"}).json()["id"]
    client.post("/v1/lots", json={"product_id": pid})

    r = client.delete(f"/v1/products/{pid}")

    assert r.status_code == 409
    assert r.json()["code"] == "in_use"


def test_lot_starts_empty_and_keeps_creation_date(client):
    pid = client.post("/v1/products", json={"name": "P"}).json()["id"]

    r = client.post(
        "/v1/lots",
        json={"product_id": pid, "description": "container 7", "created_at": "2026-03-01T10:00:00+00:00"},
    )
    lot = r.json()

    assert r.status_code == 200
    assert Decimal(lot["quantity"]) == 0
    assert lot["created_at"].startswith("2026-03-01T10:00:00")

    r = client.put(f"/v1/lots/{lot['id']}", json={"description": "container 7 (ouvert)"})
    updated = r.json()
    assert updated["description"] == "container 7 (ouvert)"
    assert updated["created_at"] == lot["created_at"]
    assert updated["product_id"] == pid


def test_lot_update_ignores_quantity(client):
    pid = client.post("/v1/products", json={"name": "P"}).json()["id"]
    lot_id = client.post("/v1/lots", json={"product_id": pid}).json()["id"]

    r = client.put(f"/v1/lots/{lot_id}", json={"description": "x", "quantity": "500"})

    assert Decimal(r.json()["quantity"]) == 0


def test_lot_for_unknown_product(client):
    r = client.post("/v1/lots", json={"product_id": 404})
    assert r.status_code == 404
    assert r.json()["code"] == "not_found"


def test_lot_delete(client):
    pid = client.post("/v1/products", json={"name": "P"}).json()["id"]
    empty = client.post("/v1/lots", json={"product_id": pid}).json()["id"]
    used = client.post("/v1/lots", json={"product_id": pid}).json()["id"]
    client.post("/v1/product-lot-transactions", json={"product_id": pid, "lot_id": used, "quantity": "1"})

    assert client.delete(f"/v1/lots/{empty}").status_code == 200
    assert client.get(f"/v1/lots/{empty}").status_code == 404

    r = client.delete(f"/v1/lots/{used}")
    assert r.status_code == 409
    assert r.json()["code"] == "in_use"
    assert [lot["id"] for lot in client.get("/v1/lots").json()] == [used]
