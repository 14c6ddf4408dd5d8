from __future__ import annotations
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List, Optional

from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import auth, tasks
from .config import CORS_ORIGINS, LOG_LEVEL
from .db import engine, Base
from .deps import get_db, get_current_user
from .errors import NotFound, TaskTrackerError
from .logging_setup import setup_logging
from .schemas import Credentials, LoginOut, MessageOut, TaskCreate, TaskOut, TaskUpdate
from .security import AuthenticatedUserId

logger = logging.getLogger(__name__)

# --- DB init ---
Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    setup_logging(LOG_LEVEL)
    logger.info("tasktracker api starting db=%s", engine.url.render_as_string(hide_password=True))
    yield


# --- App init ---
app = FastAPI(title="Task Tracker", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Error mapping ---
@app.exception_handler(TaskTrackerError)
async def tasktracker_error_handler(request: Request, exc: TaskTrackerError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # field locations only; the errors themselves echo request input
    fields = [".".join(str(p) for p in e.get("loc", ())) for e in exc.errors()]
    logger.info("rejected request %s %s fields=%s", request.method, request.url.path, fields)
    return JSONResponse(status_code=400, content={"error": "Invalid request"})


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Server error"})


# --- Health ---
@app.get("/")
def health(db: Session = Depends(get_db)) -> Dict[str, str]:
    try:
        db.execute(text("SELECT 1"))
        status = "connected"
    except SQLAlchemyError:
        logger.exception("database health check failed")
        status = "disconnected"
    return {"status": "running", "database": status}


# --- Auth routes ---
@app.post("/api/register", status_code=201, response_model=MessageOut)
def register(body: Credentials, db: Session = Depends(get_db)) -> MessageOut:
    auth.register(db, body.email, body.password)
    return MessageOut(message="User registered successfully")


@app.post("/api/login", response_model=LoginOut)
def login(body: Credentials, db: Session = Depends(get_db)) -> LoginOut:
    return auth.login(db, body.email, body.password)


# --- API: tasks CRUD ---
@app.get("/api/tasks", response_model=List[TaskOut])
def list_tasks(
    db: Session = Depends(get_db),
    user_id: AuthenticatedUserId = Depends(get_current_user),
) -> List[TaskOut]:
    return [TaskOut.model_validate(t) for t in tasks.list_tasks(db, user_id)]


@app.post("/api/tasks", response_model=TaskOut)
def create_task(
    body: TaskCreate,
    db: Session = Depends(get_db),
    user_id: AuthenticatedUserId = Depends(get_current_user),
) -> TaskOut:
    task = tasks.create_task(db, user_id, body.model_dump())
    return TaskOut.model_validate(task)


@app.put("/api/tasks/{task_id}", response_model=Optional[TaskOut])
def update_task(
    task_id: str,
    body: TaskUpdate,
    db: Session = Depends(get_db),
    user_id: AuthenticatedUserId = Depends(get_current_user),
) -> Optional[TaskOut]:
    try:
        task = tasks.update_task(db, user_id, task_id, body.model_dump(exclude_unset=True))
    except NotFound:
        # absent and foreign tasks both answer with an empty body
        return None
    return TaskOut.model_validate(task)


@app.delete("/api/tasks/{task_id}", response_model=MessageOut)
def delete_task(
    task_id: str,
    db: Session = Depends(get_db),
    user_id: AuthenticatedUserId = Depends(get_current_user),
) -> MessageOut:
    try:
        tasks.delete_task(db, user_id, task_id)
    except NotFound:
        pass
    return MessageOut(message="Task deleted")
