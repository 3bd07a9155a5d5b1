"""Table and reservation tests, including table status side effects."""

import re

from cafe.core import identifiers
from cafe.services.table_service import ReservationService

RESERVATION_NUMBER = re.compile(r"^RES-[0-9A-Z]+-[0-9A-Z]{3}$")


def _create_table(client, headers, **overrides) -> dict:
    body = {"tableNumber": 5, "seatingCapacity": 4, "location": "indoor"}
    body.update(overrides)
    resp = client.post("/api/tables/tables", json=body, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["table"]


def _reservation_body(table_id, **overrides) -> dict:
    body = {
        "tableId": table_id,
        "customerName": "Ann",
        "customerPhone": "0771234567",
        "customerEmail": "ann@example.com",
        "partySize": 2,
        "reservationDate": "2026-11-01",
        "reservationTime": "19:30",
    }
    body.update(overrides)
    return body


def _create_reservation(client, headers, table_id, **overrides) -> dict:
    resp = client.post(
        "/api/tables/reservations", json=_reservation_body(table_id, **overrides), headers=headers
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["reservation"]


def _table_status(client, table_id) -> str:
    return client.get(f"/api/tables/tables/{table_id}").json()["status"]


# ============== Tables ==============

class TestTables:
    def test_create_table(self, client, auth_headers):
        resp = client.post(
            "/api/tables/tables",
            json={"tableNumber": 5, "location": "outdoor", "description": "By the window"},
            headers=auth_headers,
        )
        assert resp.status_code == 201
        data = resp.json()
        assert data["message"] == "Table created successfully"
        table = data["table"]
        assert table["seatingCapacity"] == 4
        assert table["status"] == "available"
        assert table["location"] == "outdoor"
        assert table["reservations"] == []

    def test_duplicate_number_rejected(self, client, auth_headers):
        _create_table(client, auth_headers)
        resp = client.post("/api/tables/tables", json={"tableNumber": 5}, headers=auth_headers)
        assert resp.status_code == 400
        assert resp.json()["message"] == "Table with this number already exists"

    def test_renumber_onto_existing(self, client, auth_headers):
        _create_table(client, auth_headers, tableNumber=1)
        second = _create_table(client, auth_headers, tableNumber=2)
        resp = client.put(
            f"/api/tables/tables/{second['id']}",
            json={"tableNumber": 1},
            headers=auth_headers,
        )
        assert resp.status_code == 400

    def test_update_table(self, client, auth_headers):
        table = _create_table(client, auth_headers)
        resp = client.put(
            f"/api/tables/tables/{table['id']}",
            json={"status": "maintenance", "seatingCapacity": 6},
            headers=auth_headers,
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["message"] == "Table updated successfully"
        assert data["table"]["status"] == "maintenance"
        assert data["table"]["seatingCapacity"] == 6
        assert data["table"]["tableNumber"] == 5

    def test_list_ordered_and_filtered(self, client, auth_headers):
        _create_table(client, auth_headers, tableNumber=3, location="vip")
        _create_table(client, auth_headers, tableNumber=1)

        resp = client.get("/api/tables/tables")
        assert [t["tableNumber"] for t in resp.json()] == [1, 3]

        resp = client.get("/api/tables/tables", params={"location": "vip"})
        assert [t["tableNumber"] for t in resp.json()] == [3]

    def test_get_missing_table(self, client):
        resp = client.get("/api/tables/tables/9999")
        assert resp.status_code == 404
        assert resp.json() == {"message": "Table not found"}

    def test_delete_table_removes_reservations(self, client, auth_headers):
        table = _create_table(client, auth_headers)
        reservation = _create_reservation(client, auth_headers, table["id"])

        resp = client.delete(f"/api/tables/tables/{table['id']}", headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json() == {"message": "Table deleted successfully"}

        assert client.get(f"/api/tables/tables/{table['id']}").status_code == 404
        assert client.get(f"/api/tables/reservations/{reservation['id']}").status_code == 404


# ============== Reservations ==============

class TestReservations:
    def test_create_reserves_table(self, client, auth_headers):
        table = _create_table(client, auth_headers)
        resp = client.post(
            "/api/tables/reservations",
            json=_reservation_body(table["id"]),
            headers=auth_headers,
        )
        assert resp.status_code == 201
        data = resp.json()
        assert data["message"] == "Reservation created successfully"
        reservation = data["reservation"]
        assert RESERVATION_NUMBER.match(reservation["reservationNumber"])
        assert reservation["status"] == "pending"
        assert reservation["duration"] == 60
        assert reservation["reservationTime"] == "19:30:00"
        assert reservation["table"]["status"] == "reserved"
        assert _table_status(client, table["id"]) == "reserved"

    def test_create_reserves_table_in_any_state(self, client, auth_headers):
        table = _create_table(client, auth_headers, status="maintenance")
        _create_reservation(client, auth_headers, table["id"])
        assert _table_status(client, table["id"]) == "reserved"

    def test_party_larger_than_table(self, client, auth_headers):
        table = _create_table(client, auth_headers, seatingCapacity=4)
        resp = client.post(
            "/api/tables/reservations",
            json=_reservation_body(table["id"], partySize=6),
            headers=auth_headers,
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == "Party size exceeds table capacity of 4"
        assert _table_status(client, table["id"]) == "available"
        assert client.get("/api/tables/reservations").json() == []

    def test_party_equal_to_capacity(self, client, auth_headers):
        table = _create_table(client, auth_headers, seatingCapacity=4)
        reservation = _create_reservation(client, auth_headers, table["id"], partySize=4)
        assert reservation["partySize"] == 4

    def test_missing_table(self, client, auth_headers):
        resp = client.post(
            "/api/tables/reservations",
            json=_reservation_body(9999),
            headers=auth_headers,
        )
        assert resp.status_code == 404
        assert resp.json()["message"] == "Table not found"

    def test_phone_required(self, client, auth_headers):
        table = _create_table(client, auth_headers)
        body = _reservation_body(table["id"])
        del body["customerPhone"]
        resp = client.post("/api/tables/reservations", json=body, headers=auth_headers)
        assert resp.status_code == 400

    def test_cancel_releases_table(self, client, auth_headers):
        table = _create_table(client, auth_headers)
        reservation = _create_reservation(client, auth_headers, table["id"])

        resp = client.put(
            f"/api/tables/reservations/{reservation['id']}",
            json={"status": "cancelled"},
            headers=auth_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["message"] == "Reservation updated successfully"
        assert resp.json()["reservation"]["status"] == "cancelled"
        assert _table_status(client, table["id"]) == "available"

    def test_complete_releases_table(self, client, auth_headers):
        table = _create_table(client, auth_headers)
        reservation = _create_reservation(client, auth_headers, table["id"])
        client.put(
            f"/api/tables/reservations/{reservation['id']}",
            json={"status": "completed"},
            headers=auth_headers,
        )
        assert _table_status(client, table["id"]) == "available"

    def test_confirm_keeps_table_reserved(self, client, auth_headers):
        table = _create_table(client, auth_headers)
        reservation = _create_reservation(client, auth_headers, table["id"])
        client.put(
            f"/api/tables/reservations/{reservation['id']}",
            json={"status": "confirmed"},
            headers=auth_headers,
        )
        assert _table_status(client, table["id"]) == "reserved"

    def test_cancel_while_moving_releases_previous_table(self, client, auth_headers):
        first = _create_table(client, auth_headers, tableNumber=1)
        second = _create_table(client, auth_headers, tableNumber=2)
        reservation = _create_reservation(client, auth_headers, first["id"])

        resp = client.put(
            f"/api/tables/reservations/{reservation['id']}",
            json={"tableId": second["id"], "status": "cancelled"},
            headers=auth_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["reservation"]["tableId"] == second["id"]
        assert _table_status(client, first["id"]) == "available"

    def test_move_to_missing_table(self, client, auth_headers):
        table = _create_table(client, auth_headers)
        reservation = _create_reservation(client, auth_headers, table["id"])
        resp = client.put(
            f"/api/tables/reservations/{reservation['id']}",
            json={"tableId": 9999},
            headers=auth_headers,
        )
        assert resp.status_code == 404

    def test_party_size_not_rechecked_on_update(self, client, auth_headers):
        table = _create_table(client, auth_headers, seatingCapacity=2)
        reservation = _create_reservation(client, auth_headers, table["id"])
        resp = client.put(
            f"/api/tables/reservations/{reservation['id']}",
            json={"partySize": 8},
            headers=auth_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["reservation"]["partySize"] == 8

    def test_delete_releases_table(self, client, auth_headers):
        table = _create_table(client, auth_headers)
        reservation = _create_reservation(client, auth_headers, table["id"])

        resp = client.delete(f"/api/tables/reservations/{reservation['id']}", headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json() == {"message": "Reservation deleted successfully"}
        assert _table_status(client, table["id"]) == "available"
        assert client.get(f"/api/tables/reservations/{reservation['id']}").status_code == 404

    def test_get_missing_reservation(self, client):
        resp = client.get("/api/tables/reservations/9999")
        assert resp.status_code == 404
        assert resp.json() == {"message": "Reservation not found"}

    def test_list_by_date_then_time(self, client, auth_headers):
        table = _create_table(client, auth_headers, seatingCapacity=8)
        late = _create_reservation(client, auth_headers, table["id"], reservationTime="21:00")
        next_day = _create_reservation(client, auth_headers, table["id"], reservationDate="2026-11-02", reservationTime="12:00")
        early = _create_reservation(client, auth_headers, table["id"], reservationTime="18:00")

        resp = client.get("/api/tables/reservations")
        assert [r["id"] for r in resp.json()] == [early["id"], late["id"], next_day["id"]]

        resp = client.get("/api/tables/reservations", params={"date": "2026-11-02"})
        assert [r["id"] for r in resp.json()] == [next_day["id"]]

    def test_list_by_status(self, client, auth_headers):
        table = _create_table(client, auth_headers)
        kept = _create_reservation(client, auth_headers, table["id"])
        dropped = _create_reservation(client, auth_headers, table["id"])
        client.put(
            f"/api/tables/reservations/{dropped['id']}",
            json={"status": "no_show"},
            headers=auth_headers,
        )

        resp = client.get("/api/tables/reservations", params={"status": "pending"})
        assert [r["id"] for r in resp.json()] == [kept["id"]]

    def test_table_lists_its_reservations(self, client, auth_headers):
        table = _create_table(client, auth_headers)
        reservation = _create_reservation(client, auth_headers, table["id"])
        detail = client.get(f"/api/tables/tables/{table['id']}").json()
        assert [r["id"] for r in detail["reservations"]] == [reservation["id"]]


class TestReservationNumberCollision:
    def test_capacity_rechecked_after_collision(self, client, auth_headers, monkeypatch):
        table = _create_table(client, auth_headers)
        candidates = iter(["RES-SAME-AAA", "RES-SAME-AAA", "RES-FRESH-BBB"])
        monkeypatch.setattr(identifiers, "generate_business_number", lambda prefix: next(candidates))
        _create_reservation(client, auth_headers, table["id"])

        checks = []
        check_capacity = ReservationService._check_capacity

        def counting(self, table_id, party_size):
            checks.append(table_id)
            return check_capacity(self, table_id, party_size)

        monkeypatch.setattr(ReservationService, "_check_capacity", counting)

        reservation = _create_reservation(client, auth_headers, table["id"])
        assert reservation["reservationNumber"] == "RES-FRESH-BBB"
        assert checks == [table["id"], table["id"]]
        assert _table_status(client, table["id"]) == "reserved"
