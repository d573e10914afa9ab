from __future__ import annotations

from fastapi.testclient import TestClient

from api.app import app


client = TestClient(app)


def test_health():
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_voice_score_endpoint():
    resp = client.post(
        "/voice/score",
        json={
            "expected_text": "the cat sat",
            "transcript": "the cat sit",
            "words": [
                {"text": "the", "start": 0.1, "end": 0.3},
                {"text": "cat", "start": 0.4, "end": 0.6},
                {"text": "sit", "start": 1.4, "end": 1.6},
            ],
        },
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["accuracy_percent"] == 89
    assert body["hesitation_count"] == 1
    assert body["total_pause_ms"] == 800
    assert body["fluency_percent"] == 95
    assert body["feedback"]


def test_state_round_trip_through_answers():
    state = client.get("/adaptive/state").json()
    assert state["difficulty_modifier"] == 0
    message = None
    for _ in range(3):
        body = client.post(
            "/adaptive/answer",
            json={"state": state, "is_correct": True, "response_time_ms": 1200},
        ).json()
        state, message = body["state"], body["message"]
    assert state["difficulty_modifier"] == 1
    assert state["correct_streak"] == 0
    assert message is not None


def test_answer_rejects_out_of_range_modifier():
    resp = client.post(
        "/adaptive/answer",
        json={"state": {"difficulty_modifier": 5}, "is_correct": True},
    )
    assert resp.status_code == 422


def test_time_limit_endpoint():
    resp = client.post("/adaptive/time-limit", json={"base_time_limit_sec": 20, "grade": "4", "difficulty_modifier": 2})
    assert resp.json() == {"time_limit_sec": 14}
    bad = client.post("/adaptive/time-limit", json={"grade": "four"})
    assert bad.status_code == 400


def test_select_endpoint_is_seeded():
    pool = [
        {"id": f"q{i}", "difficulty_level": 1 + i % 3, "grade_band": "3-4"} for i in range(6)
    ] + [{"id": "far", "difficulty_level": 2, "grade_band": "7-8"}]
    payload = {"pool": pool, "grade": "3", "difficulty_modifier": 0, "count": 10, "seed": 5}
    first = client.post("/adaptive/select", json=payload).json()
    second = client.post("/adaptive/select", json=payload).json()
    assert first == second
    assert first["grade_band"] == "3-4"
    assert first["target_difficulty"] == 2
    assert first["short"] is True
    assert "far" not in {q["id"] for q in first["questions"]}


def test_score_endpoint():
    resp = client.post("/adaptive/score", json={"raw_score": 80, "difficulty_modifier": 2})
    assert resp.json() == {"adjusted_score": 84.0}


def test_answer_rejects_state_with_both_streaks():
    resp = client.post(
        "/adaptive/answer",
        json={"state": {"correct_streak": 1, "incorrect_streak": 1}, "is_correct": False},
    )
    assert resp.status_code == 422


def test_select_endpoint_drops_repeated_ids():
    pool = [{"id": "same", "difficulty_level": 2, "grade_band": "3-4"} for _ in range(3)]
    body = client.post("/adaptive/select", json={"pool": pool, "grade": "4", "count": 3, "seed": 1}).json()
    assert [q["id"] for q in body["questions"]] == ["same"]
