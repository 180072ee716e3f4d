"""Pydantic request/response schemas used by the API.

Each entity has three shapes:
- a *patch* with every field optional, used to parse raw payloads while
  remembering which keys the caller actually sent;
- a *record* with every writable field required, produced by the
  validators and handed to the query builder;
- a *read* shape for responses.

Fields are snake_case in Python and camelCase on the wire.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore")


class _Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", from_attributes=True)


class DeveloperPatch(_Payload):
    """Raw developer payload; any subset of fields."""
    name: Optional[str] = None
    email: Optional[str] = None


class DeveloperRecord(_Schema):
    """Validated developer values ready to be written."""
    name: str
    email: str


class DeveloperRead(_Schema):
    id: int
    name: str
    email: str
    developer_infos_id: Optional[int] = Field(default=None, alias="developerInfosId")


class DeveloperInfoPatch(_Payload):
    """Raw developer info payload; any subset of fields."""
    developer_since: Optional[date] = Field(default=None, alias="developerSince")
    preferred_os: Optional[str] = Field(default=None, alias="preferredOS")


class DeveloperInfoRecord(_Schema):
    developer_since: date = Field(alias="developerSince")
    preferred_os: str = Field(alias="preferredOS")


class DeveloperInfoRead(DeveloperInfoRecord):
    id: int


class ProjectPatch(_Payload):
    """Raw project payload; any subset of fields."""
    name: Optional[str] = None
    description: Optional[str] = None
    estimated_time: Optional[str] = Field(default=None, alias="estimatedTime")
    repository: Optional[str] = None
    start_date: Optional[date] = Field(default=None, alias="startDate")
    end_date: Optional[date] = Field(default=None, alias="endDate")
    developer_id: Optional[int] = Field(default=None, alias="developerId")


class ProjectRecord(_Schema):
    """Validated project values. `end_date` is null for an ongoing project."""
    name: str
    description: str
    estimated_time: str = Field(alias="estimatedTime")
    repository: str
    start_date: date = Field(alias="startDate")
    end_date: Optional[date] = Field(alias="endDate")
    developer_id: int = Field(alias="developerId")


class ProjectRead(ProjectRecord):
    id: int


class TechnologyPatch(_Payload):
    """Payload naming a catalog technology to link to a project."""
    name: Optional[str] = None


class ProjectTechnologyRecord(_Schema):
    added_in: datetime = Field(alias="addedIn")
    project_id: int = Field(alias="projectId")
    technology_id: int = Field(alias="technologyId")
