"""FastAPI application entrypoint and HTTP controllers.

This module defines the HTTP endpoints of the developer/project
tracker. Controllers are intentionally thin: existence guards load the
path entity, services validate and persist, and the exception handlers
below turn domain errors into JSON responses.

Endpoints implemented:
- POST/GET /developers, GET/PATCH/DELETE /developers/{id}
- POST/PATCH /developers/{id}/infos, GET /developers/{id}/projects
- POST/GET /projects, GET/PATCH/DELETE /projects/{id}
- POST /projects/{id}/tecnologies (alias /projects/{id}/technologies)
- DELETE /projects/{id}/technologies/{name}
- GET /health
"""

import json
import logging
import time
import uuid
from typing import Any, Dict, List, Optional

from fastapi import Body, Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from sqlmodel import Session

from . import models, schemas, services
from .config import settings
from .database import create_db_and_tables, get_session
from .errors import DevTrackerError
from .guards import existing_developer, existing_project

app = FastAPI(title="Developer Project Tracker API")
logger = logging.getLogger("devtracker.api")
if not logger.handlers:
    logging.basicConfig(level=settings.LOG_LEVEL)

if settings.ALLOW_DEV_CORS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

create_db_and_tables()


def _request_summary(request: Request, req_id: str, started: float) -> Dict[str, Any]:
    return {
        "request_id": req_id,
        "path": request.url.path,
        "method": request.method,
        "duration_ms": round((time.perf_counter() - started) * 1000.0, 2),
        "client": request.client.host if request.client else "unknown",
    }


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    response: Response
    try:
        response = await call_next(request)
    except Exception:
        logger.exception("request_failed %s", json.dumps(_request_summary(request, req_id, started), ensure_ascii=True))
        raise
    response.headers["X-Request-ID"] = req_id
    summary = _request_summary(request, req_id, started)
    summary["status_code"] = response.status_code
    logger.info("request_done %s", json.dumps(summary, ensure_ascii=True))
    return response


@app.exception_handler(DevTrackerError)
async def domain_error_handler(request: Request, exc: DevTrackerError):
    logger.info("request_rejected kind=%s path=%s message=%s", exc.kind.value, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_body()))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": ".".join(str(part) for part in err.get("loc", ())), "detail": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"message": "Invalid request.", "errors": errors})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("unexpected_error path=%s", request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal server error."})


# ---------------------------------------------------------------- developers

@app.post('/developers', status_code=201, response_model=schemas.DeveloperRead)
def create_developer(payload: Dict[str, Any] = Body(...), db: Session = Depends(get_session)):
    """Create a developer from `{name, email}`.

    Fails with 400 when the email is missing, 409 when it is already
    used and 400 when another required key is absent.
    """
    return services.DeveloperService(db).create(payload)


@app.get('/developers')
def list_developers(db: Session = Depends(get_session)) -> List[Dict[str, Any]]:
    """List developers joined with their info columns."""
    return services.DeveloperService(db).list()


@app.get('/developers/{developer_id}')
def get_developer(developer: models.Developer = Depends(existing_developer), db: Session = Depends(get_session)) -> Optional[Dict[str, Any]]:
    return services.DeveloperService(db).get(developer)


@app.get('/developers/{developer_id}/projects')
def get_developer_projects(developer: models.Developer = Depends(existing_developer), db: Session = Depends(get_session)) -> Optional[Dict[str, Any]]:
    """Return the developer row with its projects and their technologies nested."""
    return services.DeveloperService(db).get_with_projects(developer)


@app.patch('/developers/{developer_id}', response_model=schemas.DeveloperRead)
def update_developer(payload: Dict[str, Any] = Body(...), developer: models.Developer = Depends(existing_developer), db: Session = Depends(get_session)):
    return services.DeveloperService(db).update(developer, payload)


@app.delete('/developers/{developer_id}', status_code=204)
def delete_developer(developer: models.Developer = Depends(existing_developer), db: Session = Depends(get_session)):
    """Delete the developer together with its info row."""
    services.DeveloperService(db).delete(developer)
    return Response(status_code=204)


@app.post('/developers/{developer_id}/infos', status_code=201, response_model=schemas.DeveloperInfoRead)
def create_developer_info(payload: Dict[str, Any] = Body(...), developer: models.Developer = Depends(existing_developer), db: Session = Depends(get_session)):
    """Create `{developerSince, preferredOS}` and link it to the developer."""
    return services.DeveloperInfoService(db).create(developer, payload)


@app.patch('/developers/{developer_id}/infos', response_model=schemas.DeveloperInfoRead)
def update_developer_info(payload: Dict[str, Any] = Body(...), developer: models.Developer = Depends(existing_developer), db: Session = Depends(get_session)):
    return services.DeveloperInfoService(db).update(developer, payload)


# ------------------------------------------------------------------ projects

@app.post('/projects', status_code=201, response_model=schemas.ProjectRead)
def create_project(payload: Dict[str, Any] = Body(...), db: Session = Depends(get_session)):
    """Create a project; `developerId` must name an existing developer (404 otherwise)."""
    return services.ProjectService(db).create(payload)


@app.get('/projects')
def list_projects(db: Session = Depends(get_session)) -> List[Dict[str, Any]]:
    """List projects joined with their technologies."""
    return services.ProjectService(db).list()


@app.get('/projects/{project_id}')
def get_project(project: models.Project = Depends(existing_project), db: Session = Depends(get_session)) -> List[Dict[str, Any]]:
    return services.ProjectService(db).get(project)


@app.patch('/projects/{project_id}', response_model=schemas.ProjectRead)
def update_project(payload: Dict[str, Any] = Body(...), project: models.Project = Depends(existing_project), db: Session = Depends(get_session)):
    return services.ProjectService(db).update(project, payload)


@app.delete('/projects/{project_id}', status_code=204)
def delete_project(project: models.Project = Depends(existing_project), db: Session = Depends(get_session)):
    """Delete the project and its technology links."""
    services.ProjectService(db).delete(project)
    return Response(status_code=204)


@app.post('/projects/{project_id}/tecnologies', status_code=201)
@app.post('/projects/{project_id}/technologies', status_code=201)
def add_project_technology(project_id: int, payload: Dict[str, Any] = Body(...), db: Session = Depends(get_session)):
    """Link the catalog technology `{name}` to the project.

    The misspelled `/tecnologies` path is kept for existing clients.
    """
    services.ProjectTechnologyService(db).add(project_id, payload)
    return Response(status_code=201)


@app.delete('/projects/{project_id}/technologies/{name}', status_code=204)
def remove_project_technology(project_id: int, name: str, db: Session = Depends(get_session)):
    services.ProjectTechnologyService(db).remove(project_id, name)
    return Response(status_code=204)


@app.get("/health")
def health():
    """Lightweight health check for uptime monitoring."""
    return {"status": "ok"}
