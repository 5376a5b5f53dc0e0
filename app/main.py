from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.database import get_db, init_db
from app.repository import TaskRepository, new_photo_id
from app.schemas import (
    AddTaskRequest,
    AnalysisResponse,
    DetectRequest,
    DetectResponse,
    NarrativeRequest,
    ParseRequest,
    ParseResult,
    ProgressResponse,
    Routine,
    RoutineRequest,
    SkinCondition,
    TaskListResponse,
    TaskRecord,
)
from app.services.analysis import SkinAnalysisService
from app.services.conditions import detect_conditions, generate_personalized_tasks
from app.services.routine_builder import get_recommended_routine
from app.services.task_parser import parse_tasks_with_stage
from app.services.task_rules import completion_progress, progress_by_category
from app.skin_conditions import SKIN_CONDITIONS, get_condition
import logging

settings = get_settings()

# Set up logging
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

ANALYSIS_FAILED = "Analysis failed, please try again"


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    yield


app = FastAPI(title="GlowTrack", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Dependencies ────────────────────────────────────────────────────────────


def get_task_repository() -> TaskRepository:
    return TaskRepository()


def get_analysis_service() -> SkinAnalysisService:
    return SkinAnalysisService(settings)


async def _read_image(file: UploadFile) -> bytes:
    if not file.content_type or not file.content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="Upload must be an image")
    data = await file.read()
    if not data:
        raise HTTPException(status_code=400, detail="Empty image upload")
    return data


def _not_found(photo_id: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"No tasks for photo {photo_id}")


# ── Routes ──────────────────────────────────────────────────────────────────


@app.get("/")
async def health_check():
    return {"status": "healthy", "service": "GlowTrack"}


@app.get("/conditions", response_model=list[SkinCondition])
async def list_conditions():
    return list(SKIN_CONDITIONS.values())


@app.get("/conditions/{condition_id}", response_model=SkinCondition)
async def read_condition(condition_id: str):
    condition = get_condition(condition_id)
    if condition is None:
        raise HTTPException(status_code=404, detail=f"Unknown condition: {condition_id}")
    return condition


@app.post("/conditions/detect", response_model=DetectResponse)
async def detect(body: DetectRequest):
    return DetectResponse(conditions=detect_conditions(body.text))


@app.post("/routine", response_model=Routine)
async def build_routine(body: RoutineRequest):
    return get_recommended_routine(body.conditions)


@app.post("/routine/tasks", response_model=list[TaskRecord])
async def routine_tasks(body: NarrativeRequest):
    return generate_personalized_tasks(body.text)


@app.post("/tasks/parse", response_model=ParseResult)
async def parse(body: ParseRequest):
    return parse_tasks_with_stage(body.response)


@app.post("/analyze", response_model=AnalysisResponse)
async def analyze(
    file: UploadFile = File(...),
    concerns: Optional[str] = Form(default=None),
    service: SkinAnalysisService = Depends(get_analysis_service),
):
    image = await _read_image(file)
    user_concerns = [c.strip() for c in concerns.split(",") if c.strip()] if concerns else None
    try:
        analysis = await service.analyze_image_with_enhancement(
            image, file.content_type, user_concerns
        )
    except Exception as e:
        logger.error(f"Error in /analyze: {str(e)}")
        raise HTTPException(status_code=500, detail=ANALYSIS_FAILED)
    return AnalysisResponse(analysis=analysis, conditions=detect_conditions(analysis))


@app.post("/analyze/tasks", response_model=TaskListResponse)
async def analyze_tasks(
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    repo: TaskRepository = Depends(get_task_repository),
    service: SkinAnalysisService = Depends(get_analysis_service),
):
    image = await _read_image(file)
    tasks = await service.analyze_image_for_tasks(image, file.content_type)
    photo_id = new_photo_id()
    await repo.store_tasks(db, tasks, photo_id)
    logger.info(f"Analysed photo {photo_id} | Tasks: {len(tasks)}")
    return TaskListResponse(photo_id=photo_id, tasks=tasks)


@app.get("/tasks/latest", response_model=TaskListResponse)
async def latest_tasks(
    db: AsyncSession = Depends(get_db),
    repo: TaskRepository = Depends(get_task_repository),
):
    photo_id = await repo.get_latest_photo_id(db)
    if photo_id is None:
        raise HTTPException(status_code=404, detail="No tasks stored yet")
    tasks = await repo.get_tasks_for_photo(db, photo_id)
    return TaskListResponse(photo_id=photo_id, tasks=tasks or [])


@app.get("/tasks/{photo_id}", response_model=TaskListResponse)
async def tasks_for_photo(
    photo_id: str,
    db: AsyncSession = Depends(get_db),
    repo: TaskRepository = Depends(get_task_repository),
):
    tasks = await repo.get_tasks_for_photo(db, photo_id)
    if tasks is None:
        raise _not_found(photo_id)
    return TaskListResponse(photo_id=photo_id, tasks=tasks)


@app.post("/tasks/{photo_id}/items", response_model=TaskListResponse)
async def add_task(
    photo_id: str,
    body: AddTaskRequest,
    db: AsyncSession = Depends(get_db),
    repo: TaskRepository = Depends(get_task_repository),
):
    tasks = await repo.add_task(db, photo_id, body.text)
    if tasks is None:
        raise _not_found(photo_id)
    return TaskListResponse(photo_id=photo_id, tasks=tasks)


@app.post("/tasks/{photo_id}/{task_id}/toggle", response_model=TaskListResponse)
async def toggle_task(
    photo_id: str,
    task_id: str,
    db: AsyncSession = Depends(get_db),
    repo: TaskRepository = Depends(get_task_repository),
):
    tasks = await repo.set_task_completed(db, photo_id, task_id)
    if tasks is None:
        raise HTTPException(status_code=404, detail=f"No task {task_id} for photo {photo_id}")
    return TaskListResponse(photo_id=photo_id, tasks=tasks)


@app.get("/tasks/{photo_id}/progress", response_model=ProgressResponse)
async def task_progress(
    photo_id: str,
    db: AsyncSession = Depends(get_db),
    repo: TaskRepository = Depends(get_task_repository),
):
    tasks = await repo.get_tasks_for_photo(db, photo_id)
    if tasks is None:
        raise _not_found(photo_id)
    return ProgressResponse(
        overall=completion_progress(tasks),
        by_category=progress_by_category(tasks),
    )
