"""Request helpers shared across the API tests."""

CARD = {"card_number": "4242424242424242", "expiry_date": "12/30", "cvv": "123"}


def register(client, phone, role="customer", password="secret", name="Test User"):
    response = client.post(
        "/register",
        json={"name": name, "phone": phone, "password": password, "role": role},
    )
    assert response.status_code == 200, response.text
    return response.json()


def place_order(client, items, pickup_time="12:00", **extra):
    payload = {"items": items, "pickup_time": pickup_time}
    payload.update(extra)
    response = client.post("/orders", json=payload)
    assert response.status_code == 200, response.text
    return response.json()


def line(menu_item_id, quantity=1, notes=""):
    return {"menu_item_id": menu_item_id, "quantity": quantity, "notes": notes}
