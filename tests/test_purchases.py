from app.models.inventory import InventoryItem


async def get_item(sku):
    return await InventoryItem.find_one(InventoryItem.sku == sku)


def purchase_payload(quantity, sku="SKU-001", cost=3.0):
    return {
        "supplier": "Acme Supply",
        "items": [{"sku": sku, "name": "Widget", "quantity": quantity, "cost_price": cost}],
    }


async def test_purchase_adds_stock_and_sets_unit_cost(client, make_item):
    await make_item(quantity=5, unit_cost=2.0)

    response = await client.post("/api/purchases", json=purchase_payload(10, cost=3.0))
    assert response.status_code == 201, response.text
    purchase = response.json()
    assert purchase["grand_total"] == 30.0
    assert purchase["purchase_id"].startswith("PUR-")

    item = await get_item("SKU-001")
    assert item.quantity == 15
    assert item.unit_cost == 3.0


async def test_zero_cost_price_keeps_unit_cost(client, make_item):
    await make_item(quantity=5, unit_cost=2.0)

    await client.post("/api/purchases", json=purchase_payload(1, cost=0))

    item = await get_item("SKU-001")
    assert item.quantity == 6
    assert item.unit_cost == 2.0


async def test_purchase_of_unknown_sku_creates_item(client):
    response = await client.post("/api/purchases", json=purchase_payload(7, sku="NEW-1", cost=1.25))
    assert response.status_code == 201

    item = await get_item("NEW-1")
    assert item is not None
    assert item.quantity == 7
    assert item.unit_cost == 1.25
    assert item.name == "Widget"


async def test_delete_purchase_reverses_stock(client, make_item):
    await make_item(quantity=5)
    purchase = (await client.post("/api/purchases", json=purchase_payload(10))).json()

    response = await client.delete(f"/api/purchases/{purchase['id']}")
    assert response.status_code == 204
    assert (await get_item("SKU-001")).quantity == 5


async def test_reversal_never_goes_negative(client, make_item):
    await make_item(quantity=0)
    purchase = (await client.post("/api/purchases", json=purchase_payload(4))).json()
    await client.post(
        "/api/sales",
        json={"items": [{"sku": "SKU-001", "quantity": 3, "selling_price": 9}]},
    )

    await client.delete(f"/api/purchases/{purchase['id']}")
    assert (await get_item("SKU-001")).quantity == 0


async def test_update_purchase_reapplies_items(client, make_item):
    await make_item(quantity=5)
    purchase = (await client.post("/api/purchases", json=purchase_payload(10))).json()

    response = await client.put(
        f"/api/purchases/{purchase['id']}",
        json={"items": purchase_payload(2, cost=4.0)["items"], "notes": "corrected"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["grand_total"] == 8.0
    assert body["notes"] == "corrected"
    assert (await get_item("SKU-001")).quantity == 7


async def test_empty_purchase_is_rejected(client):
    response = await client.post("/api/purchases", json={"supplier": "x", "items": []})
    assert response.status_code == 400
