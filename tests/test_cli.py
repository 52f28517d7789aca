"""Tests for the command-line interface."""

import json

import pytest

from workout_recommender.cli import main


@pytest.fixture
def snapshot_path(tmp_path):
    data = {
        "catalog": [
            {
                "id": "push-up",
                "name": "Push Up",
                "category": "push",
                "muscleTargets": [
                    {"muscle": {"id": "chest", "name": "Chest"}, "weight": 0.6},
                    {"muscle": {"id": "triceps", "name": "Triceps"}, "weight": 0.4},
                ],
            },
            {
                "id": "pull-up",
                "name": "Pull Up",
                "category": "pull",
                "muscleTargets": [{"muscle": {"id": "lats", "name": "Lats"}, "weight": 1.0}],
            },
        ],
        "workouts": [
            {
                "id": "w1",
                "userId": "u1",
                "date": "2024-03-05T18:00:00",
                "type": "pull",
                "sets": [
                    {
                        "exercise": {
                            "id": "pull-up",
                            "name": "Pull Up",
                            "category": "pull",
                            "muscleTargets": [{"muscle": {"id": "lats", "name": "Lats"}, "weight": 1.0}],
                        },
                        "setNumber": 1,
                        "weight": 0,
                        "reps": 8,
                        "effort": "hard",
                    }
                ],
            }
        ],
        "checkin": {"userId": "u1", "date": "2024-03-06", "hoursSlept": 8, "energyLevel": "normal"},
    }
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(data))
    return str(path)


NOW = "2024-03-06T09:00:00"


class TestCli:
    """End-to-end CLI runs against a snapshot file."""

    def test_recommend_json(self, snapshot_path, capsys):
        assert main(["recommend", snapshot_path, "--now", NOW, "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["recommendation"]["workout_type"] == "push"
        assert data["recommendation"]["exercises"][0]["exercise_id"] == "push-up"
        assert data["features"]["day_of_week"] == 3

    def test_recommend_text(self, snapshot_path, capsys):
        assert main(["recommend", snapshot_path, "--now", NOW]) == 0
        out = capsys.readouterr().out
        assert "PUSH" in out
        assert "Push Up" in out

    def test_coverage(self, snapshot_path, capsys):
        assert main(["coverage", snapshot_path, "--now", NOW]) == 0
        out = capsys.readouterr().out
        assert "Chest" in out
        assert "never" in out

    def test_features_output_is_stable(self, snapshot_path, capsys):
        main(["features", snapshot_path, "--now", NOW])
        first = capsys.readouterr().out
        main(["features", snapshot_path, "--now", NOW])
        assert capsys.readouterr().out == first

    def test_metrics(self, snapshot_path, capsys):
        assert main(["metrics", snapshot_path, "--date", "2024-03-05"]) == 0
        out = capsys.readouterr().out
        assert "Workouts:      1" in out
        assert "Lats" in out

    def test_aware_snapshot_with_naive_now(self, snapshot_path, capsys):
        with open(snapshot_path) as f:
            data = json.load(f)
        data["workouts"][0]["date"] = "2024-03-05T18:00:00+00:00"
        with open(snapshot_path, "w") as f:
            json.dump(data, f)

        assert main(["recommend", snapshot_path, "--now", NOW, "--json"]) == 0
        result = json.loads(capsys.readouterr().out)
        assert result["features"]["hours_since_last_workout"] == 15.0
        assert result["recommendation"]["workout_type"] == "push"

    def test_missing_snapshot(self, tmp_path, capsys):
        assert main(["recommend", str(tmp_path / "missing.json")]) == 1
        assert "Could not read snapshot" in capsys.readouterr().err

    def test_invalid_snapshot_lists_errors(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"checkin": {"userId": "u1", "date": "2024-03-06", "hoursSlept": 30}}))
        assert main(["recommend", str(path)]) == 1
        err = capsys.readouterr().err
        assert "failed validation" in err
        assert "hoursSlept" in err

    def test_no_command(self, capsys):
        assert main([]) == 1
