"""Tests for Product API endpoints."""


def product_payload(**overrides):
    data = {
        "name": "Test Product",
        "description": "A product for testing",
        "categoryId": 1,
        "stock": 10,
        "price": 99.99,
    }
    data.update(overrides)
    return data


async def test_create_products(client, seeded):
    """Test adding a batch of products."""
    response = await client.post(
        "/api/v1/products/",
        json=[product_payload(), product_payload(name="Second", categoryId=2)]
    )

    assert response.status_code == 201
    data = response.json()
    assert len(data) == 2
    assert data[0]["name"] == "Test Product"
    assert data[0]["price"] == "99.99"
    assert data[0]["stock"] == 10
    assert data[0]["category"] == "Kitchenware"
    assert data[0]["categoryId"] == 1
    assert data[0]["createdBy"] == "System"
    assert "createdDate" in data[0]
    assert data[0]["modifiedDate"] is None
    assert data[1]["category"] == "Books"
    assert data[0]["id"] != data[1]["id"]
    assert all(100000 <= item["id"] <= 999999 for item in data)


async def test_create_products_empty_list(client, seeded):
    """Test an empty batch is rejected."""
    response = await client.post("/api/v1/products/", json=[])

    assert response.status_code == 400
    assert "cannot be empty" in response.json()["detail"]


async def test_create_product_invalid_price(client, seeded):
    """Test creating product with invalid price fails."""
    response = await client.post(
        "/api/v1/products/",
        json=[product_payload(price=-10.00)]  # Invalid: negative price
    )

    assert response.status_code == 400
    assert "Price" in response.json()["detail"]


async def test_create_product_invalid_stock(client, seeded):
    """Test creating product with negative stock fails."""
    response = await client.post(
        "/api/v1/products/",
        json=[product_payload(stock=-5)]  # Invalid: negative stock
    )

    assert response.status_code == 400


async def test_create_product_unknown_category(client, seeded):
    """Test a missing category fails the whole batch with 404."""
    response = await client.post(
        "/api/v1/products/",
        json=[product_payload(), product_payload(categoryId=77)]
    )

    assert response.status_code == 404
    assert "77" in response.json()["detail"]

    # Nothing from the batch was stored
    products = (await client.get("/api/v1/products/")).json()
    assert [p["id"] for p in products] == [100001]


async def test_get_product(client, seeded):
    """Test getting a product by ID."""
    create_response = await client.post("/api/v1/products/", json=[product_payload()])
    product_id = create_response.json()[0]["id"]

    response = await client.get(f"/api/v1/products/{product_id}")

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == product_id
    assert data["name"] == "Test Product"
    assert data["description"] == "A product for testing"


async def test_get_product_not_found(client, seeded):
    """Test getting non-existent product returns 404."""
    response = await client.get("/api/v1/products/999999")

    assert response.status_code == 404


async def test_list_products(client, seeded):
    """Test listing all products."""
    await client.post(
        "/api/v1/products/",
        json=[product_payload(name=f"Product {i}", price=10.00 + i) for i in range(3)]
    )

    response = await client.get("/api/v1/products/")

    assert response.status_code == 200
    data = response.json()
    assert len(data) == 4
    assert data[0]["id"] <= data[-1]["id"]


async def test_list_products_empty(client):
    response = await client.get("/api/v1/products/")

    assert response.status_code == 200
    assert response.json() == []


async def test_update_product(client, seeded):
    """Test updating a product."""
    response = await client.put(
        "/api/v1/products/100001",
        json=product_payload(name="Updated Name", price=75.00, categoryId=2, stock=3)
    )

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Updated Name"
    assert data["price"] == "75.00"
    assert data["stock"] == 3
    assert data["category"] == "Books"
    assert data["modifiedBy"] == "System"
    assert data["modifiedDate"] is not None


async def test_update_product_not_found(client, seeded):
    response = await client.put("/api/v1/products/999", json=product_payload())

    assert response.status_code == 404


async def test_update_product_invalid_id(client, seeded):
    response = await client.put("/api/v1/products/0", json=product_payload())

    assert response.status_code == 400


async def test_update_product_unknown_category(client, seeded):
    response = await client.put("/api/v1/products/100001", json=product_payload(categoryId=9))

    assert response.status_code == 404


async def test_decrement_stock(client, seeded):
    """Test decrementing stock down to zero and past it."""
    response = await client.put("/api/v1/products/decrement-stock/100001/50")
    assert response.status_code == 200
    assert response.json()["stock"] == 0

    response = await client.put("/api/v1/products/decrement-stock/100001/1")
    assert response.status_code == 400
    assert "No stock available" in response.json()["detail"]


async def test_decrement_stock_insufficient(client, seeded):
    response = await client.put("/api/v1/products/decrement-stock/100001/60")

    assert response.status_code == 400
    assert "less than requested quantity" in response.json()["detail"]

    # Stock is unchanged
    product = (await client.get("/api/v1/products/100001")).json()
    assert product["stock"] == 50


async def test_decrement_stock_invalid_quantity(client, seeded):
    response = await client.put("/api/v1/products/decrement-stock/100001/0")

    assert response.status_code == 400


async def test_increment_stock(client, seeded):
    response = await client.put("/api/v1/products/add-to-stock/100001/10")

    assert response.status_code == 200
    data = response.json()
    assert data["stock"] == 60
    assert data["modifiedBy"] == "System"


async def test_increment_stock_not_found(client, seeded):
    response = await client.put("/api/v1/products/add-to-stock/123456/10")

    assert response.status_code == 404


async def test_delete_product(client, seeded):
    """Test deleting a product."""
    response = await client.delete("/api/v1/products/100001")
    assert response.status_code == 204

    # Verify it's deleted
    get_response = await client.get("/api/v1/products/100001")
    assert get_response.status_code == 404


async def test_delete_product_not_found(client, seeded):
    response = await client.delete("/api/v1/products/999999")

    assert response.status_code == 404


async def test_delete_product_invalid_id(client, seeded):
    response = await client.delete("/api/v1/products/-1")

    assert response.status_code == 400


async def test_malformed_path_parameter_is_bad_request(client, seeded):
    response = await client.put("/api/v1/products/decrement-stock/100001/abc")

    assert response.status_code == 400
    assert "quantity" in response.json()["detail"]


async def test_malformed_body_is_bad_request(client, seeded):
    response = await client.post("/api/v1/products/", json={"name": "not a list"})

    assert response.status_code == 400
    assert isinstance(response.json()["detail"], str)


async def test_create_product_price_with_too_many_decimals(client, seeded):
    response = await client.post("/api/v1/products/", json=[product_payload(price="19.999")])

    assert response.status_code == 400
    assert "decimal places" in response.json()["detail"]


async def test_increment_stock_beyond_column_range(client, seeded):
    response = await client.put(f"/api/v1/products/add-to-stock/100001/{2**40}")

    assert response.status_code == 400

    get_response = await client.get("/api/v1/products/100001")
    assert get_response.json()["stock"] == 50
