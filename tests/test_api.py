# ============================================================================
# API Endpoint Tests
# ============================================================================
import pytest
from uuid import uuid4
from httpx import AsyncClient

from quizprep.api.v1 import users as users_api

API = "/api/v1"

@pytest.fixture
async def practice_topic(make_topic):
    """Three one-mark questions and their answers keyed by question id"""
    topic, questions = await make_topic(count=3)
    return str(topic.id), {str(q.id): q.correct_answer for q in questions}

async def start(client, user_id, topic_id, **extra):
    return await client.post(
        f"{API}/sessions/start",
        json={"user_id": user_id, "topic_id": topic_id, **extra}
    )

class TestHealthEndpoint:
    """Tests for health check endpoint"""

    async def test_health_check(self, client: AsyncClient):
        """Test health check returns OK"""
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    async def test_root(self, client: AsyncClient):
        response = await client.get("/")
        assert response.json()["status"] == "running"


class TestUserEndpoints:
    """Tests for user endpoints"""

    async def test_guest_user_is_reused_per_device(self, client: AsyncClient):
        first = await client.post(f"{API}/users/guest", json={"device_id": "phone-1"})
        second = await client.post(f"{API}/users/guest", json={"device_id": "phone-1"})

        assert first.status_code == 200
        assert first.json()["id"] == second.json()["id"]
        assert first.json()["user_type"] == "guest"
        assert first.json()["current_streak"] == 0

    async def test_guest_after_concurrent_first_launch(self, client: AsyncClient, user, monkeypatch):
        """The device row appears between lookup and insert; the existing user is returned"""
        user_id = str(user.id)
        lookups = []
        get_by_device = users_api._get_by_device

        async def miss_first_lookup(db, device_id):
            lookups.append(device_id)
            if len(lookups) == 1:
                return None
            return await get_by_device(db, device_id)

        monkeypatch.setattr(users_api, "_get_by_device", miss_first_lookup)
        response = await client.post(f"{API}/users/guest", json={"device_id": "device-123"})

        assert response.status_code == 200
        assert response.json()["id"] == user_id
        assert lookups == ["device-123", "device-123"]

    async def test_create_user(self, client: AsyncClient):
        response = await client.post(
            f"{API}/users",
            json={"user_type": "registered", "display_name": "Tariro", "device_id": "tablet-9"}
        )

        assert response.status_code == 201
        data = response.json()
        assert data["user_type"] == "registered"
        assert data["display_name"] == "Tariro"
        assert data["total_questions_attempted"] == 0

        response = await client.get(f"{API}/users/{data['id']}")
        assert response.json()["display_name"] == "Tariro"

    async def test_create_user_defaults_to_guest(self, client: AsyncClient):
        response = await client.post(f"{API}/users", json={})

        assert response.status_code == 201
        assert response.json()["user_type"] == "guest"

    async def test_create_user_validation(self, client: AsyncClient):
        response = await client.post(f"{API}/users", json={"user_type": "admin"})
        assert response.status_code == 422

    async def test_create_user_with_taken_device(self, client: AsyncClient, user):
        response = await client.post(f"{API}/users", json={"device_id": "device-123"})

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_REQUEST"

    async def test_update_user(self, client: AsyncClient, user):
        user_id = str(user.id)

        response = await client.put(
            f"{API}/users/{user_id}",
            json={"display_name": "Rudo", "user_type": "registered", "avatar_url": "https://example.com/a.png"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["display_name"] == "Rudo"
        assert data["user_type"] == "registered"
        assert data["avatar_url"] == "https://example.com/a.png"

        response = await client.put(f"{API}/users/{user_id}", json={"display_name": "Rudo M."})
        assert response.json()["display_name"] == "Rudo M."
        assert response.json()["user_type"] == "registered"

    async def test_update_keeps_aggregate_stats(self, client: AsyncClient, user):
        response = await client.put(
            f"{API}/users/{user.id}",
            json={"display_name": "Rudo", "current_streak": 99}
        )

        assert response.status_code == 200
        assert response.json()["current_streak"] == 0

    async def test_update_unknown_user(self, client: AsyncClient):
        response = await client.put(f"{API}/users/{uuid4()}", json={"display_name": "Nobody"})

        assert response.status_code == 404
        assert response.json()["error_code"] == "NOT_FOUND"

    async def test_unknown_user(self, client: AsyncClient):
        response = await client.get(f"{API}/users/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["error_code"] == "NOT_FOUND"


class TestSessionEndpoints:
    """Tests for the session lifecycle over HTTP"""

    async def test_full_session(self, client: AsyncClient, user, practice_topic, mock_cache):
        topic_id, answers = practice_topic
        user_id = str(user.id)

        response = await start(client, user_id, topic_id, question_count=3)
        assert response.status_code == 201
        data = response.json()
        session_id = data["session"]["id"]
        assert data["session"]["status"] == "created"
        assert len(data["questions"]) == 3
        assert "correct_answer" not in data["questions"][0]

        first, second, third = [q["id"] for q in data["questions"]]
        response = await client.post(
            f"{API}/sessions/{session_id}/answer",
            json={"question_id": first, "user_id": user_id, "selected_answer": answers[first], "time_taken_seconds": 12}
        )
        assert response.status_code == 200
        body = response.json()
        assert body["is_correct"] is True
        assert body["marks_awarded"] == 1
        assert body["correct_answer"] == answers[first]
        assert body["session"]["status"] == "in_progress"

        response = await client.post(
            f"{API}/sessions/{session_id}/answer",
            json={"question_id": second, "user_id": user_id, "selected_answer": "wrong"}
        )
        assert response.json()["is_correct"] is False

        response = await client.post(f"{API}/sessions/{session_id}/submit", json={"auto_submit": False})
        assert response.status_code == 200
        summary = response.json()["summary"]
        assert summary == {
            "total_questions": 3,
            "attempted": 2,
            "correct": 1,
            "wrong": 1,
            "skipped": 1,
            "marks_obtained": 1.0,
            "total_marks": 3.0,
            "percentage": 33,
            "auto_submitted": False,
            "time_taken_seconds": 12,
        }
        assert response.json()["session"]["status"] == "completed"
        mock_cache.delete.assert_awaited_once_with(f"analytics:{user_id}")

        response = await client.get(f"{API}/sessions/{session_id}/answers")
        assert [a["question_id"] for a in response.json()] == [first, second]

        response = await client.get(f"{API}/users/{user_id}/sessions")
        assert [s["id"] for s in response.json()] == [session_id]

        response = await client.get(f"{API}/users/{user_id}")
        assert response.json()["current_streak"] == 1
        assert response.json()["total_questions_attempted"] == 2

    async def test_submit_without_body(self, client: AsyncClient, user, practice_topic):
        topic_id, _ = practice_topic
        response = await start(client, str(user.id), topic_id)
        session_id = response.json()["session"]["id"]

        response = await client.post(f"{API}/sessions/{session_id}/submit")

        assert response.status_code == 200
        assert response.json()["summary"]["skipped"] == 3

    async def test_finalize_twice_conflicts(self, client: AsyncClient, user, practice_topic):
        topic_id, _ = practice_topic
        response = await start(client, str(user.id), topic_id)
        session_id = response.json()["session"]["id"]

        await client.post(f"{API}/sessions/{session_id}/submit", json={})
        response = await client.post(f"{API}/sessions/{session_id}/submit", json={})

        assert response.status_code == 409
        assert response.json()["error_code"] == "INVALID_STATE"

    async def test_answer_after_finalize_conflicts(self, client: AsyncClient, user, practice_topic):
        topic_id, answers = practice_topic
        user_id = str(user.id)
        response = await start(client, user_id, topic_id)
        session_id = response.json()["session"]["id"]
        question_id = response.json()["questions"][0]["id"]
        await client.post(f"{API}/sessions/{session_id}/submit", json={"auto_submit": True})

        response = await client.post(
            f"{API}/sessions/{session_id}/answer",
            json={"question_id": question_id, "user_id": user_id, "selected_answer": answers[question_id]}
        )

        assert response.status_code == 409

    async def test_start_requires_a_source(self, client: AsyncClient, user):
        response = await client.post(f"{API}/sessions/start", json={"user_id": str(user.id)})

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_REQUEST"

    async def test_start_requires_user(self, client: AsyncClient, practice_topic):
        topic_id, _ = practice_topic
        response = await client.post(f"{API}/sessions/start", json={"topic_id": topic_id})

        assert response.status_code == 400

    async def test_start_unknown_topic(self, client: AsyncClient, user):
        response = await start(client, str(user.id), str(uuid4()))

        assert response.status_code == 404
        assert response.json()["error_code"] == "NOT_FOUND"

    async def test_question_count_validation(self, client: AsyncClient, user, practice_topic):
        topic_id, _ = practice_topic
        response = await start(client, str(user.id), topic_id, question_count=0)

        assert response.status_code == 422

    async def test_unknown_session(self, client: AsyncClient):
        response = await client.get(f"{API}/sessions/{uuid4()}")
        assert response.status_code == 404

        response = await client.post(f"{API}/sessions/{uuid4()}/submit", json={})
        assert response.status_code == 404

    async def test_question_outside_session(self, client: AsyncClient, user, practice_topic):
        topic_id, _ = practice_topic
        user_id = str(user.id)
        response = await start(client, user_id, topic_id)
        session_id = response.json()["session"]["id"]

        response = await client.post(
            f"{API}/sessions/{session_id}/answer",
            json={"question_id": str(uuid4()), "user_id": user_id, "selected_answer": "Q0"}
        )

        assert response.status_code == 404


class TestAnalyticsEndpoints:
    """Tests for analytics reads"""

    async def test_analytics_after_session(self, client: AsyncClient, user, practice_topic, mock_cache):
        topic_id, answers = practice_topic
        user_id = str(user.id)
        response = await start(client, user_id, topic_id, question_count=3)
        session_id = response.json()["session"]["id"]
        for question_id, answer in answers.items():
            await client.post(
                f"{API}/sessions/{session_id}/answer",
                json={"question_id": question_id, "user_id": user_id, "selected_answer": answer}
            )
        await client.post(f"{API}/sessions/{session_id}/submit", json={})

        response = await client.get(f"{API}/users/{user_id}/analytics")

        assert response.status_code == 200
        data = response.json()
        assert data["overall"]["accuracy"] == 100
        assert data["overall"]["current_streak"] == 1
        assert [t["topic_id"] for t in data["strong_topics"]] == [topic_id]
        assert data["topic_wise"][0]["topic_name"] == "Kinematics"
        assert data["recommendations"] == []
        mock_cache.set_json.assert_awaited_once()

        response = await client.get(f"{API}/users/{user_id}/analytics/{topic_id}")
        assert response.json()["total_attempted"] == 3
        assert response.json()["strength_level"] == "strong"

    async def test_cached_analytics(self, client: AsyncClient, user, mock_cache):
        cached = {
            "overall": {
                "total_questions_attempted": 4,
                "total_correct_answers": 3,
                "accuracy": 75,
                "current_streak": 1,
                "longest_streak": 1,
                "last_active_at": None,
            },
            "topic_wise": [],
            "weak_topics": [],
            "strong_topics": [],
            "recommendations": [],
        }
        mock_cache.get_json.return_value = cached

        response = await client.get(f"{API}/users/{user.id}/analytics")

        assert response.json()["overall"]["accuracy"] == 75
        mock_cache.set_json.assert_not_awaited()

    async def test_topic_placeholder(self, client: AsyncClient, user):
        topic_id = str(uuid4())
        response = await client.get(f"{API}/users/{user.id}/analytics/{topic_id}")

        assert response.status_code == 200
        assert response.json()["strength_level"] == "neutral"
        assert response.json()["message"] == "No practice data for this topic yet"

    async def test_analytics_unknown_user(self, client: AsyncClient):
        response = await client.get(f"{API}/users/{uuid4()}/analytics")
        assert response.status_code == 404


class TestCatalogEndpoints:
    """Tests for catalog reads"""

    async def test_subjects_and_topics(self, client: AsyncClient, make_topic):
        topic, _ = await make_topic()
        topic_id, subject_id = str(topic.id), str(topic.subject_id)

        response = await client.get(f"{API}/subjects")
        assert [s["id"] for s in response.json()] == [subject_id]

        response = await client.get(f"{API}/subjects/{subject_id}/topics")
        assert [t["id"] for t in response.json()] == [topic_id]

    async def test_test_series(self, client: AsyncClient, make_topic, make_test_series):
        _, questions = await make_topic()
        series = await make_test_series(questions, total_marks=5)
        series_id = str(series.id)

        response = await client.get(f"{API}/test-series/{series_id}")
        assert response.json()["total_marks"] == 5

        response = await client.get(f"{API}/test-series/{uuid4()}")
        assert response.status_code == 404
