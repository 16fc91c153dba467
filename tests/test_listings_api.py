import pytest

from farmlink.crud.users import CredentialStore

CROP = {
    "crop_name": "Wheat",
    "quantity": "50kg",
    "price_per_kg": 25.5,
    "location": "Pune",
    "phone": "9876543210",
}

PRODUCT = {
    "product_name": "Urea 45kg",
    "price": 300,
    "description": "Nitrogen fertilizer",
    "location": "Nashik",
    "phone": "9123456780",
}


def post_crop(client, headers, **overrides):
    return client.post("/api/crops", json=dict(CROP, **overrides), headers=headers)


def post_product(client, headers, **overrides):
    return client.post("/api/products", json=dict(PRODUCT, **overrides), headers=headers)


def test_marketplace_scenario(client, farmer, register_and_login):
    user, headers = farmer

    resp = post_crop(client, headers)
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    crop_id = body["id"]

    resp = client.get("/api/my-crops", headers=headers)
    assert resp.status_code == 200
    [crop] = resp.json()["crops"]
    assert crop["id"] == crop_id
    assert crop["farmer_id"] == user["id"]
    assert crop["farmer_name"] == "Ramesh Patil"
    for key, value in CROP.items():
        assert crop[key] == value

    _, other_headers = register_and_login("9000000001", role="farmer", full_name="Suresh")
    resp = client.delete(f"/api/crops/{crop_id}", headers=other_headers)
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "error": "Crop not found or unauthorized."}

    resp = client.delete(f"/api/crops/{crop_id}", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "Crop deleted."}
    assert client.get("/api/my-crops", headers=headers).json()["crops"] == []


def test_delete_missing_crop_matches_foreign_crop(client, farmer, register_and_login):
    _, headers = farmer
    crop_id = post_crop(client, headers).json()["id"]
    _, other_headers = register_and_login("9000000001", role="farmer")

    foreign = client.delete(f"/api/crops/{crop_id}", headers=other_headers)
    missing = client.delete("/api/crops/999999", headers=other_headers)
    assert foreign.status_code == missing.status_code == 404
    assert foreign.json() == missing.json()


def test_vendor_cannot_post_crop(client, vendor):
    _, headers = vendor
    resp = post_crop(client, headers)
    assert resp.status_code == 403
    assert resp.json() == {"success": False, "error": "Only farmers can post crops."}


def test_farmer_cannot_post_product(client, farmer):
    _, headers = farmer
    resp = post_product(client, headers)
    assert resp.status_code == 403
    assert resp.json() == {"success": False, "error": "Only vendors can post products."}


def test_my_listings_are_role_gated(client, farmer, vendor):
    _, farmer_headers = farmer
    _, vendor_headers = vendor
    assert client.get("/api/my-products", headers=farmer_headers).status_code == 403
    assert client.get("/api/my-crops", headers=vendor_headers).status_code == 403


def test_delete_is_role_gated(client, farmer, vendor):
    _, farmer_headers = farmer
    _, vendor_headers = vendor
    crop_id = post_crop(client, farmer_headers).json()["id"]
    product_id = post_product(client, vendor_headers).json()["id"]

    assert client.delete(f"/api/crops/{crop_id}", headers=vendor_headers).status_code == 403
    assert client.delete(f"/api/products/{product_id}", headers=farmer_headers).status_code == 403


@pytest.mark.parametrize(
    "method, path",
    [
        ("get", "/api/crops"),
        ("get", "/api/my-crops"),
        ("post", "/api/crops"),
        ("delete", "/api/crops/1"),
        ("get", "/api/products"),
        ("get", "/api/my-products"),
        ("post", "/api/products"),
        ("delete", "/api/products/1"),
    ],
)
def test_listing_routes_require_token(client, method, path):
    kwargs = {"json": {}} if method == "post" else {}
    resp = getattr(client, method)(path, **kwargs)
    assert resp.status_code == 401
    assert resp.json()["success"] is False


def test_each_side_browses_the_other(client, farmer, vendor):
    _, farmer_headers = farmer
    _, vendor_headers = vendor
    post_crop(client, farmer_headers)
    post_product(client, vendor_headers)

    crops = client.get("/api/crops", headers=vendor_headers).json()["crops"]
    products = client.get("/api/products", headers=farmer_headers).json()["products"]
    assert [c["crop_name"] for c in crops] == ["Wheat"]
    assert [p["product_name"] for p in products] == ["Urea 45kg"]
    assert products[0]["vendor_name"] == "Agro Supplies"
    assert products[0]["description"] == "Nitrogen fertilizer"


def test_browse_is_newest_first(client, farmer):
    _, headers = farmer
    ids = [post_crop(client, headers, crop_name=name).json()["id"] for name in ("Rice", "Maize", "Onion")]
    crops = client.get("/api/crops", headers=headers).json()["crops"]
    assert [c["id"] for c in crops] == list(reversed(ids))


def test_browse_search(client, farmer, vendor):
    _, farmer_headers = farmer
    _, vendor_headers = vendor
    post_crop(client, farmer_headers, crop_name="Basmati Rice")
    post_crop(client, farmer_headers, crop_name="Onion", location="Lasalgaon")

    resp = client.get("/api/crops", params={"search": "rice"}, headers=vendor_headers)
    assert [c["crop_name"] for c in resp.json()["crops"]] == ["Basmati Rice"]

    resp = client.get("/api/crops", params={"search": "lasal"}, headers=vendor_headers)
    assert [c["crop_name"] for c in resp.json()["crops"]] == ["Onion"]

    post_product(client, vendor_headers, product_name="Sprayer", description="16 litre knapsack")
    resp = client.get("/api/products", params={"search": "KNAPSACK"}, headers=farmer_headers)
    assert [p["product_name"] for p in resp.json()["products"]] == ["Sprayer"]


@pytest.mark.parametrize(
    "override, error",
    [
        ({"crop_name": ""}, "All fields are required."),
        ({"quantity": None}, "All fields are required."),
        ({"price_per_kg": 0}, "Enter a valid price."),
        ({"price_per_kg": -3}, "Enter a valid price."),
        ({"price_per_kg": "cheap"}, "Enter a valid price."),
    ],
)
def test_create_crop_validation(client, farmer, override, error):
    _, headers = farmer
    resp = post_crop(client, headers, **override)
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": error}


def test_create_product_without_description(client, vendor):
    _, headers = vendor
    data = dict(PRODUCT)
    del data["description"]
    resp = client.post("/api/products", json=data, headers=headers)
    assert resp.status_code == 201
    [product] = client.get("/api/my-products", headers=headers).json()["products"]
    assert product["description"] == ""


def test_create_product_requires_price(client, vendor):
    _, headers = vendor
    resp = post_product(client, headers, price=None)
    assert resp.status_code == 400
    assert resp.json()["error"] == "Product name, price, location, and phone are required."


def test_vendor_product_lifecycle(client, vendor, register_and_login):
    _, headers = vendor
    product_id = post_product(client, headers).json()["id"]
    _, other_headers = register_and_login("9000000002", role="vendor")

    assert client.delete(f"/api/products/{product_id}", headers=other_headers).status_code == 404
    resp = client.delete(f"/api/products/{product_id}", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["message"] == "Product deleted."
    assert client.get("/api/products", headers=headers).json()["products"] == []


def test_my_crops_counts_after_creates_and_deletes(client, farmer, register_and_login):
    user, headers = farmer
    _, other_headers = register_and_login("9000000001", role="farmer")
    ids = [post_crop(client, headers, crop_name=f"Crop {i}").json()["id"] for i in range(4)]
    post_crop(client, other_headers)
    for crop_id in ids[:2]:
        assert client.delete(f"/api/crops/{crop_id}", headers=headers).status_code == 200

    crops = client.get("/api/my-crops", headers=headers).json()["crops"]
    assert [c["id"] for c in crops] == [ids[3], ids[2]]
    assert {c["farmer_id"] for c in crops} == {user["id"]}


def test_non_integer_listing_id(client, farmer):
    _, headers = farmer
    resp = client.delete("/api/crops/abc", headers=headers)
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_posting_after_account_removal_requires_login(app, client, farmer):
    user, headers = farmer
    db = app.state.session_factory()
    try:
        assert CredentialStore(db, app.state.hasher).delete(user["id"]) is True
    finally:
        db.close()

    resp = post_crop(client, headers)
    assert resp.status_code == 401
    assert resp.json() == {"success": False, "error": "Account no longer exists. Please login again."}
