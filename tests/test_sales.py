from app.models.inventory import InventoryItem
from app.models.sale import Sale
from app.services import stock


async def stock_of(sku):
    item = await InventoryItem.find_one(InventoryItem.sku == sku)
    return item.quantity


def sale_payload(quantity, sku="SKU-001", price=5.0):
    return {
        "customer": "Walk-in",
        "payment_method": "Cash",
        "items": [{"sku": sku, "name": "Widget", "quantity": quantity, "selling_price": price}],
    }


async def test_sale_deducts_stock_and_computes_totals(client, make_item):
    await make_item(quantity=10)

    response = await client.post("/api/sales", json=sale_payload(3, price=4.5))
    assert response.status_code == 201, response.text
    sale = response.json()
    assert sale["grand_total"] == 13.5
    assert sale["items"][0]["subtotal"] == 13.5
    assert sale["invoice"] == sale["sale_id"]
    assert sale["sale_id"].startswith("INV-")

    assert await stock_of("SKU-001") == 7


async def test_insufficient_stock_leaves_inventory_untouched(client, make_item):
    await make_item(quantity=2)

    response = await client.post("/api/sales", json=sale_payload(5))
    assert response.status_code == 400
    assert response.json()["message"] == "Insufficient stock for 'Widget'. Available: 2, Requested: 5"
    assert await stock_of("SKU-001") == 2


async def test_repeated_sku_lines_are_checked_together(client, make_item):
    await make_item(quantity=5)
    payload = sale_payload(3)
    payload["items"].append(dict(payload["items"][0]))

    response = await client.post("/api/sales", json=payload)
    assert response.status_code == 400
    assert await stock_of("SKU-001") == 5


async def test_unknown_sku_is_not_found(client):
    response = await client.post("/api/sales", json=sale_payload(1, sku="NOPE"))
    assert response.status_code == 404


async def test_sale_needs_positive_quantity(client, make_item):
    await make_item()
    response = await client.post("/api/sales", json=sale_payload(0))
    assert response.status_code == 400


async def test_delete_sale_restores_stock(client, make_item):
    await make_item(quantity=10)
    sale = (await client.post("/api/sales", json=sale_payload(4))).json()

    response = await client.delete(f"/api/sales/{sale['id']}")
    assert response.status_code == 204
    assert await stock_of("SKU-001") == 10

    missing = await client.get(f"/api/sales/{sale['id']}")
    assert missing.status_code == 404


async def test_update_sale_moves_the_difference(client, make_item):
    await make_item(quantity=10)
    sale = (await client.post("/api/sales", json=sale_payload(3))).json()

    response = await client.put(f"/api/sales/{sale['id']}", json={"items": sale_payload(5)["items"]})
    assert response.status_code == 200
    assert response.json()["grand_total"] == 25.0
    assert await stock_of("SKU-001") == 5


async def test_rejected_update_keeps_original_sale(client, make_item):
    await make_item(quantity=10)
    sale = (await client.post("/api/sales", json=sale_payload(3))).json()

    response = await client.put(f"/api/sales/{sale['id']}", json={"items": sale_payload(50)["items"]})
    assert response.status_code == 400
    assert await stock_of("SKU-001") == 7

    unchanged = (await client.get(f"/api/sales/{sale['id']}")).json()
    assert unchanged["items"][0]["quantity"] == 3


async def test_list_filters_by_payment_method(client, make_item):
    await make_item(quantity=10)
    await client.post("/api/sales", json=sale_payload(1))
    card = sale_payload(1)
    card["payment_method"] = "Card"
    await client.post("/api/sales", json=card)

    response = await client.get("/api/sales", params={"payment_method": "Card"})
    assert response.status_code == 200
    assert [row["payment_method"] for row in response.json()] == ["Card"]


async def test_failed_edit_keeps_stock_when_an_original_sku_is_gone(client, make_item):
    await make_item(sku="A", quantity=10)
    b = await make_item(sku="B", quantity=10)
    sale = (await client.post("/api/sales", json={"items": [
        {"sku": "A", "quantity": 2, "selling_price": 1},
        {"sku": "B", "quantity": 3, "selling_price": 1},
    ]})).json()
    await client.delete(f"/api/inventory/{b['id']}")

    response = await client.put(
        f"/api/sales/{sale['id']}",
        json={"items": [{"sku": "A", "quantity": 1000, "selling_price": 1}]},
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Insufficient stock for 'Widget'. Available: 10, Requested: 1000"

    assert await stock_of("A") == 8
    unchanged = (await client.get(f"/api/sales/{sale['id']}")).json()
    assert [(line["sku"], line["quantity"]) for line in unchanged["items"]] == [("A", 2), ("B", 3)]


async def test_edit_dropping_a_deleted_sku_succeeds(client, make_item):
    await make_item(sku="A", quantity=10)
    b = await make_item(sku="B", quantity=10)
    sale = (await client.post("/api/sales", json={"items": [
        {"sku": "A", "quantity": 2, "selling_price": 1},
        {"sku": "B", "quantity": 3, "selling_price": 1},
    ]})).json()
    await client.delete(f"/api/inventory/{b['id']}")

    response = await client.put(
        f"/api/sales/{sale['id']}",
        json={"items": [{"sku": "A", "quantity": 4, "selling_price": 1}]},
    )
    assert response.status_code == 200
    assert await stock_of("A") == 6


async def test_sale_losing_a_race_puts_earlier_lines_back(client, make_item, monkeypatch):
    await make_item(sku="A", quantity=10)
    await make_item(sku="B", quantity=10)

    real_check = stock.check_stock

    async def check_then_sell_b_elsewhere(items):
        await real_check(items)
        await InventoryItem.get_motor_collection().update_one({"sku": "B"}, {"$set": {"quantity": 1}})

    monkeypatch.setattr(stock, "check_stock", check_then_sell_b_elsewhere)

    response = await client.post("/api/sales", json={"items": [
        {"sku": "A", "quantity": 2, "selling_price": 1},
        {"sku": "B", "quantity": 3, "selling_price": 1},
    ]})
    assert response.status_code == 400
    assert response.json()["message"] == "Insufficient stock for 'B'. Requested: 3"

    assert await stock_of("A") == 10
    assert await stock_of("B") == 1
    assert await Sale.find_all().count() == 0
