"""Menu item tests, including image uploads."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from cafe.core.config import Settings
from cafe.main import create_app

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def _create_item(client, headers, **overrides) -> dict:
    body = {"name": "Latte", "category": "beverage", "price": "4.50"}
    body.update(overrides)
    resp = client.post("/api/menu/items", json=body, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["menuItem"]


# ============== JSON bodies ==============

class TestMenuItems:
    def test_create_item(self, client, auth_headers):
        resp = client.post(
            "/api/menu/items",
            json={
                "name": "Latte",
                "description": "Espresso with steamed milk",
                "category": "beverage",
                "price": "4.50",
                "preparationTime": 5,
            },
            headers=auth_headers,
        )
        assert resp.status_code == 201
        data = resp.json()
        assert data["message"] == "Menu item created successfully"
        item = data["menuItem"]
        assert item["price"] == "4.50"
        assert item["isAvailable"] is True
        assert item["preparationTime"] == 5
        assert item["image"] is None

    def test_default_category(self, client, auth_headers):
        resp = client.post("/api/menu/items", json={"name": "Soup", "price": "6.00"}, headers=auth_headers)
        assert resp.json()["menuItem"]["category"] == "main_course"

    def test_duplicate_name_rejected(self, client, auth_headers):
        _create_item(client, auth_headers)
        resp = client.post(
            "/api/menu/items",
            json={"name": "Latte", "price": "3.00"},
            headers=auth_headers,
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == "Menu item with this name already exists"

    def test_price_required(self, client, auth_headers):
        resp = client.post("/api/menu/items", json={"name": "Latte"}, headers=auth_headers)
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["field"] == "price"

    def test_negative_price_rejected(self, client, auth_headers):
        resp = client.post(
            "/api/menu/items",
            json={"name": "Latte", "price": "-1.00"},
            headers=auth_headers,
        )
        assert resp.status_code == 400

    def test_non_object_body_rejected(self, client, auth_headers):
        resp = client.post("/api/menu/items", json=["Latte"], headers=auth_headers)
        assert resp.status_code == 400
        assert resp.json()["message"] == "Request body must be a JSON object"

    def test_create_requires_token(self, client):
        resp = client.post("/api/menu/items", json={"name": "Latte", "price": "4.50"})
        assert resp.status_code == 401

    def test_list_is_public_and_ordered(self, client, auth_headers):
        _create_item(client, auth_headers, name="Tiramisu", category="dessert")
        _create_item(client, auth_headers, name="Mocha", category="beverage")
        _create_item(client, auth_headers, name="Americano", category="beverage")

        resp = client.get("/api/menu/items")
        assert resp.status_code == 200
        assert [i["name"] for i in resp.json()] == ["Americano", "Mocha", "Tiramisu"]

    def test_list_filters(self, client, auth_headers):
        _create_item(client, auth_headers, name="Tiramisu", category="dessert")
        _create_item(client, auth_headers, name="Mocha", category="beverage", isAvailable=False)

        resp = client.get("/api/menu/items", params={"category": "dessert"})
        assert [i["name"] for i in resp.json()] == ["Tiramisu"]

        resp = client.get("/api/menu/items", params={"available": "false"})
        assert [i["name"] for i in resp.json()] == ["Mocha"]

    def test_get_item(self, client, auth_headers):
        item = _create_item(client, auth_headers)
        resp = client.get(f"/api/menu/items/{item['id']}")
        assert resp.status_code == 200
        assert resp.json()["name"] == "Latte"

    def test_get_missing_item(self, client):
        resp = client.get("/api/menu/items/9999")
        assert resp.status_code == 404
        assert resp.json() == {"message": "Menu item not found"}

    def test_partial_update(self, client, auth_headers):
        item = _create_item(client, auth_headers)
        resp = client.put(
            f"/api/menu/items/{item['id']}",
            json={"price": "5.00", "isAvailable": False},
            headers=auth_headers,
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["message"] == "Menu item updated successfully"
        assert data["menuItem"]["price"] == "5.00"
        assert data["menuItem"]["isAvailable"] is False
        assert data["menuItem"]["name"] == "Latte"

    def test_rename_onto_existing_name(self, client, auth_headers):
        _create_item(client, auth_headers, name="Latte")
        mocha = _create_item(client, auth_headers, name="Mocha")
        resp = client.put(
            f"/api/menu/items/{mocha['id']}",
            json={"name": "Latte"},
            headers=auth_headers,
        )
        assert resp.status_code == 400

    def test_update_missing_item(self, client, auth_headers):
        resp = client.put("/api/menu/items/9999", json={"price": "1.00"}, headers=auth_headers)
        assert resp.status_code == 404

    def test_delete_item(self, client, auth_headers):
        item = _create_item(client, auth_headers)
        resp = client.delete(f"/api/menu/items/{item['id']}", headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json() == {"message": "Menu item deleted successfully"}
        assert client.get(f"/api/menu/items/{item['id']}").status_code == 404


# ============== Multipart uploads ==============

class TestMenuImages:
    def test_create_with_image(self, client, auth_headers, settings):
        resp = client.post(
            "/api/menu/items",
            data={"name": "Latte", "category": "beverage", "price": "4.50", "preparationTime": "5"},
            files={"image": ("latte.png", PNG_BYTES, "image/png")},
            headers=auth_headers,
        )
        assert resp.status_code == 201, resp.text
        item = resp.json()["menuItem"]
        assert item["image"].startswith("/uploads/menu/menu-")
        assert item["image"].endswith(".png")
        assert item["preparationTime"] == 5

        stored = Path(settings.upload_dir) / item["image"][len("/uploads/"):]
        assert stored.read_bytes() == PNG_BYTES

        served = client.get(item["image"])
        assert served.status_code == 200
        assert served.content == PNG_BYTES

    def test_multipart_without_image(self, client, auth_headers):
        resp = client.post(
            "/api/menu/items",
            data={"name": "Latte", "price": "4.50", "isAvailable": "false"},
            files={"attachment": ("notes.txt", b"ignored", "text/plain")},
            headers=auth_headers,
        )
        assert resp.status_code == 201, resp.text
        item = resp.json()["menuItem"]
        assert item["image"] is None
        assert item["isAvailable"] is False

    def test_non_image_rejected(self, client, auth_headers, settings):
        resp = client.post(
            "/api/menu/items",
            data={"name": "Latte", "price": "4.50"},
            files={"image": ("notes.txt", b"hello", "text/plain")},
            headers=auth_headers,
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == "Only image files (jpg, png, gif, webp) are allowed"
        assert client.get("/api/menu/items").json() == []
        assert list((Path(settings.upload_dir) / "menu").iterdir()) == []

    def test_invalid_fields_do_not_store_image(self, client, auth_headers, settings):
        resp = client.post(
            "/api/menu/items",
            data={"name": "Latte"},
            files={"image": ("latte.png", PNG_BYTES, "image/png")},
            headers=auth_headers,
        )
        assert resp.status_code == 400
        assert list((Path(settings.upload_dir) / "menu").iterdir()) == []

    def test_duplicate_name_removes_stored_image(self, client, auth_headers, settings):
        _create_item(client, auth_headers)
        resp = client.post(
            "/api/menu/items",
            data={"name": "Latte", "price": "4.50"},
            files={"image": ("latte.png", PNG_BYTES, "image/png")},
            headers=auth_headers,
        )
        assert resp.status_code == 400
        assert list((Path(settings.upload_dir) / "menu").iterdir()) == []

    def test_update_replaces_image(self, client, auth_headers):
        item = _create_item(client, auth_headers)
        resp = client.put(
            f"/api/menu/items/{item['id']}",
            data={"description": "Now with a picture"},
            files={"image": ("latte.jpg", PNG_BYTES, "image/jpeg")},
            headers=auth_headers,
        )
        assert resp.status_code == 200, resp.text
        updated = resp.json()["menuItem"]
        assert updated["image"].endswith(".jpg")
        assert updated["description"] == "Now with a picture"
        assert updated["price"] == "4.50"

    def test_replacing_image_removes_previous_file(self, client, auth_headers, settings):
        resp = client.post(
            "/api/menu/items",
            data={"name": "Latte", "price": "4.50"},
            files={"image": ("latte.png", PNG_BYTES, "image/png")},
            headers=auth_headers,
        )
        item = resp.json()["menuItem"]
        menu_dir = Path(settings.upload_dir) / "menu"
        old_file = menu_dir / Path(item["image"]).name

        resp = client.put(
            f"/api/menu/items/{item['id']}",
            files={"image": ("latte.gif", PNG_BYTES, "image/gif")},
            headers=auth_headers,
        )
        assert resp.status_code == 200, resp.text
        new_image = resp.json()["menuItem"]["image"]
        assert not old_file.exists()
        assert [p.name for p in menu_dir.iterdir()] == [Path(new_image).name]

    def test_update_without_image_keeps_file(self, client, auth_headers, settings):
        resp = client.post(
            "/api/menu/items",
            data={"name": "Latte", "price": "4.50"},
            files={"image": ("latte.png", PNG_BYTES, "image/png")},
            headers=auth_headers,
        )
        item = resp.json()["menuItem"]

        resp = client.put(
            f"/api/menu/items/{item['id']}", json={"price": "5.00"}, headers=auth_headers
        )
        assert resp.json()["menuItem"]["image"] == item["image"]
        assert (Path(settings.upload_dir) / "menu" / Path(item["image"]).name).exists()

    def test_delete_removes_image_file(self, client, auth_headers, settings):
        resp = client.post(
            "/api/menu/items",
            data={"name": "Latte", "price": "4.50"},
            files={"image": ("latte.png", PNG_BYTES, "image/png")},
            headers=auth_headers,
        )
        item = resp.json()["menuItem"]

        resp = client.delete(f"/api/menu/items/{item['id']}", headers=auth_headers)
        assert resp.status_code == 200
        assert list((Path(settings.upload_dir) / "menu").iterdir()) == []


@pytest.fixture
def small_upload_client(tmp_path, database):
    settings = Settings(
        database_url="sqlite:///:memory:",
        upload_dir=str(tmp_path / "small"),
        max_upload_size_mb=1,
        debug=True,
        rate_limit_enabled=False,
    )
    app = create_app(settings=settings, database=database)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client, settings


class TestUploadLimits:
    def test_oversized_image_rejected(self, small_upload_client, auth_headers):
        client, settings = small_upload_client
        too_big = b"\x00" * (1024 * 1024 + 1)
        resp = client.post(
            "/api/menu/items",
            data={"name": "Latte", "price": "4.50"},
            files={"image": ("big.png", too_big, "image/png")},
            headers=auth_headers,
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == "File too large. Maximum size is 1MB"
        assert list((Path(settings.upload_dir) / "menu").iterdir()) == []

    def test_image_at_limit_accepted(self, small_upload_client, auth_headers):
        client, _ = small_upload_client
        resp = client.post(
            "/api/menu/items",
            data={"name": "Latte", "price": "4.50"},
            files={"image": ("ok.png", b"\x00" * (1024 * 1024), "image/png")},
            headers=auth_headers,
        )
        assert resp.status_code == 201
