"""
Tests for event endpoints: publishing, feed, lifecycle and ratings.
"""

from datetime import timedelta

from gigboard.models import utcnow


def _event_payload(**overrides):
    payload = {
        "title": "Wedding Photography",
        "description": "Candid shots for a two day wedding",
        "location": "Jaipur",
        "category": "photography",
        "date_time": (utcnow() + timedelta(days=7)).isoformat(),
        "required_people": 2,
        "payment_per_person": 800,
        "skills": ["photography"]
    }
    payload.update(overrides)
    return payload


class TestEventCreationEndpoint:

    def test_create_event(self, client, organizer, auth_headers, mock_publisher):
        response = client.post("/api/v1/events", json=_event_payload(), headers=auth_headers(organizer.id))

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "published"
        assert body["applied_count"] == 0
        assert body["approved_count"] == 0
        assert body["spots_left"] == 2
        assert body["payment_per_person"] == 800.0
        assert body["payment_details"] == "₹800 per person"
        assert body["organizer"]["id"] == organizer.id
        mock_publisher.publish_event_created.assert_awaited_once()

    def test_create_event_reports_every_error(self, client, organizer, auth_headers, mock_publisher):
        response = client.post(
            "/api/v1/events",
            json=_event_payload(title="", location="", required_people=0),
            headers=auth_headers(organizer.id)
        )

        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "VALIDATION_ERROR"
        assert body["details"]["errors"] == [
            "Event title is required",
            "Location is required",
            "Number of required people must be at least 1",
        ]
        mock_publisher.publish_event_created.assert_not_called()

    def test_missing_fields_reported_with_the_rest(self, client, organizer, auth_headers):
        payload = _event_payload(
            title=" ", description="", location="", category="",
            required_people=0, payment_per_person=-5
        )
        del payload["date_time"]

        response = client.post("/api/v1/events", json=payload, headers=auth_headers(organizer.id))

        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "VALIDATION_ERROR"
        assert body["details"]["errors"] == [
            "Event title is required",
            "Event description is required",
            "Location is required",
            "Category is required",
            "Number of required people must be at least 1",
            "Payment amount must be 0 or greater",
            "Event date is required",
        ]

    def test_malformed_body_uses_error_shape(self, client, organizer, auth_headers):
        response = client.post(
            "/api/v1/events",
            json=_event_payload(required_people="several"),
            headers=auth_headers(organizer.id)
        )

        assert response.status_code == 422
        body = response.json()
        assert "detail" not in body
        assert body["error_code"] == "VALIDATION_ERROR"
        assert len(body["details"]["errors"]) == 1
        assert body["details"]["errors"][0].startswith("required_people: ")
        assert "timestamp" in body

    def test_create_event_past_date(self, client, organizer, auth_headers):
        response = client.post(
            "/api/v1/events",
            json=_event_payload(date_time=(utcnow() - timedelta(days=1)).isoformat()),
            headers=auth_headers(organizer.id)
        )
        assert response.status_code == 422
        assert response.json()["details"]["errors"] == ["Event date must be in the future"]

    def test_create_event_requires_auth(self, client):
        response = client.post("/api/v1/events", json=_event_payload())
        assert response.status_code in (401, 403)


class TestEventReadEndpoints:

    def test_feed(self, client, organizer, make_event):
        event = make_event(organizer)

        response = client.get("/api/v1/events")

        assert response.status_code == 200
        assert [item["id"] for item in response.json()] == [event.id]

    def test_event_detail_includes_roster(self, client, organizer, worker, make_event, auth_headers):
        event = make_event(organizer)
        application = client.post(
            f"/api/v1/events/{event.id}/applications", json={}, headers=auth_headers(worker.id)
        ).json()
        client.post(
            f"/api/v1/applications/{application['id']}/respond",
            json={"status": "approved"},
            headers=auth_headers(organizer.id)
        )

        response = client.get(f"/api/v1/events/{event.id}")

        assert response.status_code == 200
        body = response.json()
        assert body["approved_count"] == 1
        assert body["spots_left"] == 1
        assert [participant["user_id"] for participant in body["participants"]] == [worker.id]
        assert body["participants"][0]["payment_status"] == "pending"

    def test_missing_event(self, client):
        response = client.get("/api/v1/events/999")
        assert response.status_code == 404
        assert response.json()["details"] == {"entity": "Event", "id": 999}

    def test_search(self, client, organizer, make_event):
        wedding = make_event(organizer, title="Wedding Photography", category="photography")
        make_event(organizer, title="Corporate Stage Crew", category="crew")

        found = client.get("/api/v1/events/search", params={"q": "wedding"})
        filtered = client.get("/api/v1/events/search", params={"q": "wedding", "category": "crew"})

        assert found.status_code == 200
        assert [item["id"] for item in found.json()] == [wedding.id]
        assert filtered.json() == []

    def test_my_events(self, client, organizer, worker, make_event, auth_headers):
        event = make_event(organizer)

        mine = client.get("/api/v1/events/mine", headers=auth_headers(organizer.id)).json()
        theirs = client.get("/api/v1/events/mine", headers=auth_headers(worker.id)).json()

        assert [item["id"] for item in mine] == [event.id]
        assert theirs == []


class TestEventLifecycleEndpoints:

    def test_full_payment_flow(self, client, organizer, worker, make_event, auth_headers, mock_publisher):
        event = make_event(organizer, payment_per_person=800)
        application = client.post(
            f"/api/v1/events/{event.id}/applications", json={"message": "Available"},
            headers=auth_headers(worker.id)
        ).json()
        client.post(
            f"/api/v1/applications/{application['id']}/respond",
            json={"status": "approved"},
            headers=auth_headers(organizer.id)
        )

        started = client.post(f"/api/v1/events/{event.id}/start", headers=auth_headers(organizer.id))
        completed = client.post(f"/api/v1/events/{event.id}/complete", headers=auth_headers(organizer.id))

        assert started.json()["status"] == "in_progress"
        assert completed.status_code == 200
        assert completed.json()["status"] == "completed"

        roster = client.get(f"/api/v1/events/{event.id}/participants").json()
        assert roster[0]["payment_status"] == "released"
        assert roster[0]["payment_amount"] == 800.0

        notifications = client.get("/api/v1/users/me/notifications", headers=auth_headers(worker.id)).json()
        assert "payment_received" in [n["type"] for n in notifications]

        profile = client.get(f"/api/v1/users/{worker.id}").json()
        assert profile["events_attended"] == 1
        assert mock_publisher.publish_event_status_changed.await_count == 2

    def test_complete_twice_is_noop(self, client, organizer, make_event, auth_headers, mock_publisher):
        event = make_event(organizer)
        client.post(f"/api/v1/events/{event.id}/complete", headers=auth_headers(organizer.id))

        response = client.post(f"/api/v1/events/{event.id}/complete", headers=auth_headers(organizer.id))

        assert response.status_code == 200
        assert response.json()["status"] == "completed"
        organizer_profile = client.get(f"/api/v1/users/{organizer.id}").json()
        assert organizer_profile["events_organized"] == 1
        mock_publisher.publish_event_status_changed.assert_awaited_once()

    def test_cancel_then_complete_conflicts(self, client, organizer, make_event, auth_headers):
        event = make_event(organizer)
        cancelled = client.post(f"/api/v1/events/{event.id}/cancel", headers=auth_headers(organizer.id))
        response = client.post(f"/api/v1/events/{event.id}/complete", headers=auth_headers(organizer.id))

        assert cancelled.json()["status"] == "cancelled"
        assert response.status_code == 409
        assert response.json()["error_code"] == "CONFLICT"

    def test_non_organizer_cannot_cancel(self, client, organizer, worker, make_event, auth_headers):
        event = make_event(organizer)
        response = client.post(f"/api/v1/events/{event.id}/cancel", headers=auth_headers(worker.id))
        assert response.status_code == 403

    def test_highlight_needs_premium(self, client, organizer, make_event, auth_headers):
        event = make_event(organizer)
        response = client.post(
            f"/api/v1/events/{event.id}/highlight", json={"duration_hours": 24},
            headers=auth_headers(organizer.id)
        )
        assert response.status_code == 403


class TestRatingEndpoint:

    def test_rate_participant(self, client, organizer, worker, make_event, auth_headers, mock_publisher):
        event = make_event(organizer)

        response = client.post(
            f"/api/v1/events/{event.id}/ratings",
            json={"rated_user_id": worker.id, "rating": 4.5, "rating_type": "organizer_to_participant"},
            headers=auth_headers(organizer.id)
        )

        assert response.status_code == 201
        assert response.json()["rating"] == 4.5
        assert client.get(f"/api/v1/users/{worker.id}").json()["rating"] == 4.5
        mock_publisher.publish_rating_created.assert_awaited_once()

    def test_duplicate_rating(self, client, organizer, worker, make_event, auth_headers):
        event = make_event(organizer)
        payload = {"rated_user_id": worker.id, "rating": 4, "rating_type": "organizer_to_participant"}
        client.post(f"/api/v1/events/{event.id}/ratings", json=payload, headers=auth_headers(organizer.id))

        response = client.post(
            f"/api/v1/events/{event.id}/ratings", json=payload, headers=auth_headers(organizer.id)
        )

        assert response.status_code == 409
        assert response.json()["error_message"] == "You have already rated this user for this event"

    def test_out_of_range_rating(self, client, organizer, worker, make_event, auth_headers):
        event = make_event(organizer)
        response = client.post(
            f"/api/v1/events/{event.id}/ratings",
            json={"rated_user_id": worker.id, "rating": 6, "rating_type": "organizer_to_participant"},
            headers=auth_headers(organizer.id)
        )
        assert response.status_code == 422
