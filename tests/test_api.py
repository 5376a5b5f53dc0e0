"""
HTTP route tests: storage and model calls are replaced through FastAPI
dependency overrides.
"""

from typing import Optional

import pytest
from fastapi.testclient import TestClient

from app.database import get_db
from app.main import app, get_analysis_service, get_task_repository
from app.schemas import TaskCategory, TaskRecord
from app.services.task_rules import category_of, make_task_id

JPEG = ("face.jpg", b"\xff\xd8\xff\xe0fake", "image/jpeg")


# ── Fakes ───────────────────────────────────────────────────────────────────


class InMemoryTaskRepository:
    """Dict-backed stand-in with TaskRepository's interface."""

    def __init__(self):
        self.lists: dict[str, list[TaskRecord]] = {}

    async def store_tasks(self, db, tasks, photo_id):
        self.lists.pop(photo_id, None)
        self.lists[photo_id] = [t.model_copy() for t in tasks]

    async def get_latest_photo_id(self, db) -> Optional[str]:
        return next(reversed(self.lists), None)

    async def get_tasks_for_photo(self, db, photo_id):
        return self.lists.get(photo_id)

    async def set_task_completed(self, db, photo_id, task_id, completed=None):
        tasks = self.lists.get(photo_id)
        target = next((t for t in tasks or [] if t.id == task_id), None)
        if target is None:
            return None
        target.completed = (not target.completed) if completed is None else completed
        return tasks

    async def add_task(self, db, photo_id, text):
        tasks = self.lists.get(photo_id)
        if tasks is None:
            return None
        n = sum(1 for t in tasks if category_of(t) == TaskCategory.TASK.value) + 1
        tasks.append(TaskRecord(id=make_task_id(TaskCategory.TASK, n), text=text))
        return tasks


class FakeAnalysisService:
    def __init__(self, analysis: str = "Mild rosacea on the cheeks.", fail: bool = False):
        self.analysis = analysis
        self.fail = fail
        self.concerns = None

    async def analyze_image_with_enhancement(self, image_data, media_type="image/jpeg", user_concerns=None):
        self.concerns = user_concerns
        if self.fail:
            raise RuntimeError("model unavailable")
        return self.analysis

    async def analyze_image_for_tasks(self, image_data, media_type="image/jpeg"):
        return [
            TaskRecord(id="morning_1", text="Cleanse 🌞"),
            TaskRecord(id="morning_2", text="SPF 🌞"),
            TaskRecord(id="evening_1", text="Retinol 🌙"),
        ]


async def _no_db():
    yield None


@pytest.fixture
def repo():
    return InMemoryTaskRepository()


@pytest.fixture
def service():
    return FakeAnalysisService()


@pytest.fixture
def client(repo, service):
    app.dependency_overrides[get_db] = _no_db
    app.dependency_overrides[get_task_repository] = lambda: repo
    app.dependency_overrides[get_analysis_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


# ── Stateless routes ────────────────────────────────────────────────────────


class TestStatelessRoutes:
    def test_health(self, client):
        assert client.get("/").json() == {"status": "healthy", "service": "GlowTrack"}

    def test_parse(self, client):
        response = client.post(
            "/tasks/parse",
            json={"response": "BEGIN_MORNING_TASKS\nTASK: Wash face\nEND_MORNING_TASKS"},
        )
        assert response.status_code == 200
        assert response.json() == {
            "stage": "markers",
            "tasks": [{"id": "morning_1", "text": "Wash face 🌞", "completed": False}],
        }

    def test_parse_empty_gives_defaults(self, client):
        body = client.post("/tasks/parse", json={"response": ""}).json()
        assert body["stage"] == "default"
        assert len(body["tasks"]) == 8

    def test_detect(self, client):
        response = client.post("/conditions/detect", json={"text": "I have blackheads"})
        assert response.json() == {"conditions": ["comedones"]}

    def test_conditions(self, client):
        assert len(client.get("/conditions").json()) == 7
        assert client.get("/conditions/rosacea").json()["name"] == "Rosacea"
        assert client.get("/conditions/eczema").status_code == 404

    def test_routine(self, client):
        routine = client.post("/routine", json={"conditions": ["comedones", "rosacea"]}).json()
        assert routine["weekly"] == ["Gentle oat or centella mask", "No physical exfoliation"]

    def test_routine_tasks(self, client):
        tasks = client.post("/routine/tasks", json={"text": "Some rosacea"}).json()
        assert tasks[0]["id"] == "morning_1"
        assert tasks[-1]["id"] == "weekly_2"


# ── Analysis and stored tasks ───────────────────────────────────────────────


class TestAnalysisRoutes:
    def test_analyze(self, client, service):
        response = client.post(
            "/analyze", files={"file": JPEG}, data={"concerns": "redness, dark spots,"}
        )
        assert response.status_code == 200
        assert response.json() == {
            "analysis": "Mild rosacea on the cheeks.",
            "conditions": ["rosacea"],
        }
        assert service.concerns == ["redness", "dark spots"]

    def test_analyze_rejects_non_image(self, client):
        response = client.post("/analyze", files={"file": ("notes.txt", b"hello", "text/plain")})
        assert response.status_code == 400

    def test_analyze_failure(self, client, service):
        service.fail = True
        response = client.post("/analyze", files={"file": JPEG})
        assert response.status_code == 500
        assert response.json()["detail"] == "Analysis failed, please try again"

    def test_latest_before_any_analysis(self, client):
        assert client.get("/tasks/latest").status_code == 404

    def test_task_lifecycle(self, client):
        created = client.post("/analyze/tasks", files={"file": JPEG}).json()
        photo_id = created["photo_id"]
        assert [t["id"] for t in created["tasks"]] == ["morning_1", "morning_2", "evening_1"]

        latest = client.get("/tasks/latest").json()
        assert latest["photo_id"] == photo_id

        toggled = client.post(f"/tasks/{photo_id}/morning_2/toggle").json()
        assert [t["completed"] for t in toggled["tasks"]] == [False, True, False]

        added = client.post(f"/tasks/{photo_id}/items", json={"text": "Drink water"}).json()
        assert added["tasks"][-1] == {"id": "task_1", "text": "Drink water", "completed": False}

        progress = client.get(f"/tasks/{photo_id}/progress").json()
        assert progress["overall"] == {"completed": 1, "total": 4, "percent": 25.0}
        assert progress["by_category"]["morning"]["percent"] == 50.0

    def test_unknown_photo(self, client):
        assert client.get("/tasks/nope").status_code == 404
        assert client.get("/tasks/nope/progress").status_code == 404
        assert client.post("/tasks/nope/morning_1/toggle").status_code == 404
        assert client.post("/tasks/nope/items", json={"text": "x"}).status_code == 404

    def test_add_task_requires_text(self, client, repo):
        created = client.post("/analyze/tasks", files={"file": JPEG}).json()
        photo_id = created["photo_id"]

        assert client.post(f"/tasks/{photo_id}/items", json={"text": ""}).status_code == 422
        assert client.post(f"/tasks/{photo_id}/items", json={"text": "   "}).status_code == 422
        assert len(repo.lists[photo_id]) == 3

    def test_add_task_text_is_stripped(self, client):
        created = client.post("/analyze/tasks", files={"file": JPEG}).json()
        added = client.post(
            f"/tasks/{created['photo_id']}/items", json={"text": "  Drink water \n"}
        ).json()
        assert added["tasks"][-1]["text"] == "Drink water"
