"""
FastAPI Server - REST API for plan recognition and planning projects
"""
from typing import Optional, List
from enum import Enum
import uuid
from datetime import datetime

from fastapi import FastAPI, File, UploadFile, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
import logging

from config.settings import settings

from ..ingestion.loader import DocumentLoader, InputFormat
from ..pipeline import run_recognition

logger = logging.getLogger(__name__)


class ProjectStatus(str, Enum):
    CREATED = "created"
    RECOGNIZED = "recognized"
    FAILED = "failed"


class PointModel(BaseModel):
    x: float
    y: float


class RoomModel(BaseModel):
    id: Optional[str] = None
    name: str
    height: Optional[float] = None
    area: Optional[float] = None
    vertices: List[PointModel]


class WallModel(BaseModel):
    id: Optional[str] = None
    start: PointModel
    end: PointModel
    loadBearing: bool = False
    thickness: float = Field(gt=0)


class GeometryModel(BaseModel):
    rooms: List[RoomModel] = Field(default_factory=list)


class PlanModel(BaseModel):
    address: Optional[str] = None
    area: Optional[str] = None
    ceilingHeight: Optional[str] = None
    source: Optional[str] = None
    recognitionStatus: Optional[str] = None


class PlanningProjectRequest(BaseModel):
    """Recognized plan submitted for persistence"""
    plan: PlanModel = Field(default_factory=PlanModel)
    geometry: GeometryModel = Field(default_factory=GeometryModel)
    walls: List[WallModel] = Field(default_factory=list)


class PlanningProjectResponse(BaseModel):
    id: str
    status: ProjectStatus
    createdAt: datetime
    plan: PlanModel
    geometry: GeometryModel
    walls: List[WallModel]


def create_app(loader: Optional[DocumentLoader] = None) -> FastAPI:
    """Create and configure FastAPI application"""

    app = FastAPI(
        title="Floor Plan Recognition API",
        description="Recognize walls and rooms in floor plan images and PDFs",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    document_loader = loader or DocumentLoader(
        pdf_scale=settings.pdf_render_scale,
        text_pages=settings.pdf_text_pages,
    )

    # In-memory project storage per app (replace with a database in production)
    projects: dict[str, dict] = {}

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "healthy", "version": "0.1.0"}

    @app.post("/recognize")
    async def recognize(
        file: UploadFile = File(...),
        scale: Optional[float] = None,
    ):
        """
        Recognize walls and rooms on an uploaded floor plan.

        - **file**: PDF or image file of floor plan
        - **scale**: Known meters per pixel, skips scale estimation
        """
        filename = file.filename or "upload"
        format_type = document_loader.detect_format(filename, file.content_type)
        if format_type == InputFormat.UNKNOWN:
            raise HTTPException(
                status_code=400,
                detail=f"Unsupported file type: {file.content_type}"
            )

        content = await file.read()
        result = await run_recognition(
            filename,
            data=content,
            content_type=file.content_type,
            loader=document_loader,
            scale=scale,
        )
        return result.to_dict()

    @app.post("/projects", response_model=PlanningProjectResponse)
    async def create_project(request: PlanningProjectRequest):
        """Store a recognized plan and return its generated id"""
        project_id = str(uuid.uuid4())
        status = ProjectStatus.CREATED
        if request.plan.recognitionStatus == "recognized":
            status = ProjectStatus.RECOGNIZED
        elif request.plan.recognitionStatus == "failed":
            status = ProjectStatus.FAILED

        projects[project_id] = {
            "id": project_id,
            "status": status,
            "createdAt": datetime.utcnow(),
            "plan": request.plan,
            "geometry": request.geometry,
            "walls": request.walls,
        }
        logger.info(f"Created project {project_id} with {len(request.walls)} walls")
        return PlanningProjectResponse(**projects[project_id])

    @app.get("/projects/{project_id}", response_model=PlanningProjectResponse)
    async def get_project(project_id: str):
        """Get a stored planning project"""
        if project_id not in projects:
            raise HTTPException(status_code=404, detail="Project not found")
        return PlanningProjectResponse(**projects[project_id])

    return app


app = create_app()
