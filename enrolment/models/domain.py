# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Domain models — pure data structures, NO FastAPI dependency.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class Role(str, Enum):
    HR_MANAGER = "HR_MANAGER"
    EMPLOYEE = "EMPLOYEE"


class Relationship(str, Enum):
    """Declaration order is the display order of an employee's members."""
    SELF = "SELF"
    SPOUSE = "SPOUSE"
    CHILD = "CHILD"
    PARENT = "PARENT"


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


RELATIONSHIP_ORDER = {r.value: i for i, r in enumerate(Relationship)}


class Identity(BaseModel):
    """The authenticated caller, resolved once per request."""
    model_config = ConfigDict(frozen=True)

    id: int
    username: str
    role: Role


EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"
