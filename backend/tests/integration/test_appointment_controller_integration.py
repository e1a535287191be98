"""
Integration tests for the HTTP boundary.

Drives the Flask app through its test client and checks that every
scheduling error kind is marshaled to the expected status code.
"""

import pytest

from tests.conftest import BARBER_ONE_ID, BARBER_TWO_ID, HAIRCUT_ID, TEST_DAY

DAY = TEST_DAY.date().isoformat()


def at(hour, minute=0):
    return TEST_DAY.replace(hour=hour, minute=minute).isoformat()


def booking(**overrides):
    data = {
        "clientName": "Maria Souza",
        "clientPhone": "(11) 91234-5678",
        "date": at(9),
        "barberId": BARBER_ONE_ID,
        "serviceId": HAIRCUT_ID,
        "duration": 30,
        "price": 35,
    }
    data.update(overrides)
    return data


@pytest.mark.integration
@pytest.mark.api
class TestAppointmentEndpoints:
    def test_create_then_get(self, client, response_helper):
        created = response_helper.assert_json_response(
            client.post("/api/appointments", json=booking()), 201
        )
        appointment_id = created["data"]["id"]

        fetched = response_helper.assert_json_response(
            client.get(f"/api/appointments/{appointment_id}")
        )

        assert created["success"] is True
        assert fetched["data"]["barber_name"] == "Ana Costa"
        assert fetched["data"]["end"] == at(9, 30)

    def test_validation_error_is_400_with_all_errors(self, client, response_helper):
        body = response_helper.assert_json_response(
            client.post("/api/appointments", json={}), 400
        )

        assert body["success"] is False
        assert body["data"]["error"] == "validation_error"
        assert len(body["data"]["errors"]) >= 5

    def test_conflict_is_409(self, client, response_helper):
        client.post("/api/appointments", json=booking())

        body = response_helper.assert_json_response(
            client.post("/api/appointments", json=booking(date=at(9, 15))), 409
        )

        assert body["data"]["error"] == "conflict"
        assert body["data"]["conflicting_appointment"]["start"] == at(9)

    def test_unknown_appointment_is_404(self, client, response_helper):
        body = response_helper.assert_json_response(
            client.get("/api/appointments/" + "f" * 24), 404
        )

        assert body["data"]["error"] == "not_found"

    def test_malformed_id_is_400(self, client, response_helper):
        response_helper.assert_json_response(
            client.get("/api/appointments/undefined"), 400
        )

    def test_no_op_update_is_400(self, client, response_helper):
        created = client.post("/api/appointments", json=booking()).get_json()

        body = response_helper.assert_json_response(
            client.put(f"/api/appointments/{created['data']['id']}", json={}), 400
        )

        assert body["data"]["error"] == "no_op"

    def test_update_cancel_complete_delete(self, client, response_helper):
        first = client.post("/api/appointments", json=booking()).get_json()["data"]
        second = client.post(
            "/api/appointments", json=booking(date=at(11))
        ).get_json()["data"]

        moved = response_helper.assert_json_response(
            client.patch(f"/api/appointments/{first['id']}", json={"date": at(10)})
        )
        cancelled = response_helper.assert_json_response(
            client.post(
                f"/api/appointments/{first['id']}/cancel",
                json={"reason": "client request"},
            )
        )
        completed = response_helper.assert_json_response(
            client.post(f"/api/appointments/{second['id']}/complete", json={})
        )
        response_helper.assert_json_response(
            client.delete(f"/api/appointments/{second['id']}")
        )

        assert moved["data"]["date"] == at(10)
        assert cancelled["data"]["notes"] == "Cancelled: client request"
        assert completed["data"]["notes"] == "Service completed"
        response_helper.assert_json_response(
            client.get(f"/api/appointments/{second['id']}"), 404
        )

    def test_invalid_transition_is_400(self, client, response_helper):
        created = client.post("/api/appointments", json=booking()).get_json()["data"]
        client.post(f"/api/appointments/{created['id']}/complete", json={})

        body = response_helper.assert_json_response(
            client.post(f"/api/appointments/{created['id']}/cancel", json={}), 400
        )

        assert body["data"]["error"] == "invalid_transition"

    def test_list_search_and_stats(self, client, response_helper):
        client.post("/api/appointments", json=booking())
        client.post(
            "/api/appointments",
            json=booking(date=at(10), clientName="João Pedro", barberId=BARBER_TWO_ID),
        )

        day = response_helper.assert_json_response(
            client.get(f"/api/appointments?date={DAY}")
        )
        found = response_helper.assert_json_response(
            client.post("/api/appointments/search", json={"clientName": "maria"})
        )
        stats = response_helper.assert_json_response(
            client.get(f"/api/appointments/stats?start_date={DAY}&end_date={DAY}")
        )

        assert len(day["data"]) == 2
        assert [apt["client_name"] for apt in found["data"]] == ["Maria Souza"]
        assert stats["data"]["total_count"] == 2
        assert stats["data"]["count_by_barber"] == {BARBER_ONE_ID: 1, BARBER_TWO_ID: 1}


@pytest.mark.integration
@pytest.mark.api
class TestAvailabilityEndpoints:
    def test_availability_and_slots(self, client, response_helper):
        client.post("/api/appointments", json=booking())

        busy = response_helper.assert_json_response(
            client.get(
                f"/api/availability?barber_id={BARBER_ONE_ID}&date={at(9, 15)}&duration=30"
            )
        )
        slots = response_helper.assert_json_response(
            client.get(
                f"/api/availability/slots?barber_id={BARBER_ONE_ID}&date={DAY}&duration=30"
            )
        )

        assert busy["data"] == {"available": False}
        starts = [slot["start"] for slot in slots["data"]]
        assert at(9) not in starts
        assert at(9, 30) in starts

    def test_daily_schedule(self, client, response_helper):
        client.post("/api/appointments", json=booking())

        body = response_helper.assert_json_response(client.get(f"/api/schedule?date={DAY}"))

        by_barber = {entry["barber_id"]: entry for entry in body["data"]}
        assert len(by_barber[BARBER_ONE_ID]["appointments"]) == 1
        assert by_barber[BARBER_TWO_ID]["appointments"] == []

    def test_missing_barber_is_400(self, client, response_helper):
        response_helper.assert_json_response(
            client.get(f"/api/availability/slots?date={DAY}"), 400
        )


@pytest.mark.integration
@pytest.mark.api
class TestCatalogAndHealthEndpoints:
    def test_barbers_and_services(self, client, response_helper):
        barbers = response_helper.assert_json_response(client.get("/api/barbers"))
        services = response_helper.assert_json_response(client.get("/api/services"))

        assert [barber["name"] for barber in barbers["data"]] == [
            "Ana Costa",
            "Bruno Lima",
        ]
        assert {service["name"] for service in services["data"]} == {"Beard", "Haircut"}

    def test_database_health(self, client, response_helper):
        body = response_helper.assert_json_response(client.get("/health/db"))

        assert body["data"]["connected"] is True

    def test_unknown_route_is_json_404(self, client):
        response = client.get("/api/nope")

        assert response.status_code == 404
        assert response.get_json()["success"] is False


@pytest.mark.integration
@pytest.mark.api
class TestHistoryEndpoints:
    def test_upcoming_and_client_history(self, client, response_helper):
        client.post("/api/appointments", json=booking(clientPhone="11912345678"))

        upcoming = response_helper.assert_json_response(
            client.get("/api/appointments/upcoming?limit=5")
        )
        history = response_helper.assert_json_response(
            client.get("/api/appointments/client/11912345678")
        )
        past = response_helper.assert_json_response(client.get("/api/appointments/past"))

        assert [apt["date"] for apt in upcoming["data"]] == [at(9)]
        assert len(history["data"]) == 1
        assert past["data"] == []

    def test_bad_limit_is_400(self, client, response_helper):
        response_helper.assert_json_response(
            client.get("/api/appointments/upcoming?limit=0"), 400
        )
