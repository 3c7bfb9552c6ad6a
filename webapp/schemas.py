"""Request body schemas.

Fields are snake_case; camelCase keys are accepted as aliases so either
spelling works on the wire.
"""

from datetime import datetime, timezone
from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

EMAIL_PATTERN = r'^[^@\s]+@[^@\s]+\.[^@\s]+$'
URL_PATTERN = r'^(https?://\S+)?$'
E164_PATTERN = r'^(\+[1-9]\d{6,14})?$'
COMPANY_PHONE_PATTERN = r'^[0-9+\s()-]+$'

JobType = Literal["Full-time", "Part-time", "Contract", "Internship", "Temporary"]
ExperienceLevel = Literal["Entry-level", "Mid-level", "Senior", "Executive"]


class RequestModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra='ignore',
    )


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------

class UserRegistration(RequestModel):
    name: str = Field(min_length=2)
    email: str = Field(pattern=EMAIL_PATTERN)
    password: str = Field(min_length=8)


class Credentials(RequestModel):
    email: Optional[str] = None
    password: Optional[str] = None


class CompanyRegistration(RequestModel):
    company_name: str = Field(min_length=2)
    email: str = Field(pattern=EMAIL_PATTERN)
    password: str = Field(min_length=8)
    confirm_password: str
    phone: str = Field(pattern=COMPANY_PHONE_PATTERN)
    company_address: str = Field(min_length=1)
    industry: str = Field(min_length=1)
    website: Optional[str] = Field(default=None, pattern=URL_PATTERN)

    @model_validator(mode='after')
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class EmailRequest(RequestModel):
    email: str = Field(pattern=EMAIL_PATTERN)


class PasswordReset(RequestModel):
    token: str = Field(min_length=1)
    email: str = Field(pattern=EMAIL_PATTERN)
    password: str = Field(min_length=8)


class AdminCreate(RequestModel):
    email: str = Field(pattern=EMAIL_PATTERN)
    password: str = Field(min_length=6)
    name: Optional[str] = None


# ---------------------------------------------------------------------------
# Jobs
# ---------------------------------------------------------------------------

class JobUpdate(RequestModel):
    """Every field optional; only the ones sent are applied."""

    job_title: Optional[str] = Field(default=None, min_length=5, max_length=100)
    description: Optional[str] = Field(default=None, min_length=20)
    job_type: Optional[JobType] = None
    location: Optional[str] = Field(default=None, min_length=1)
    industry: Optional[str] = None
    remote_option: Optional[bool] = None
    skills: Optional[Union[str, List[str]]] = None
    experience_level: Optional[ExperienceLevel] = None
    application_deadline: Optional[datetime] = None
    salary_range: Optional[str] = None
    min_salary: Optional[float] = None
    max_salary: Optional[float] = None
    currency: Optional[str] = None
    benefits: Optional[Union[str, List[str]]] = None
    responsibilities: Optional[Union[str, List[str]]] = None
    qualifications: Optional[Union[str, List[str]]] = None
    status: Optional[str] = None

    @field_validator('skills')
    @classmethod
    def at_most_ten_skills(cls, value):
        if value is None:
            return value
        items = value.split(",") if isinstance(value, str) else value
        if len([s for s in items if s.strip()]) > 10:
            raise ValueError("A job can list at most 10 skills")
        return value

    @field_validator('application_deadline')
    @classmethod
    def deadline_in_future(cls, value):
        if value is None:
            return value
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        if value <= datetime.now(timezone.utc):
            raise ValueError("Application deadline must be in the future")
        return value


class JobCreate(JobUpdate):
    job_title: str = Field(min_length=5, max_length=100)
    description: str = Field(min_length=20)
    job_type: JobType
    location: str = Field(min_length=1)
    remote_option: bool = False


class StatusUpdate(RequestModel):
    status: Optional[str] = None


# ---------------------------------------------------------------------------
# Applications and interviews
# ---------------------------------------------------------------------------

class ApplicationCreate(RequestModel):
    job_id: str = Field(min_length=1)
    cover_letter: Optional[str] = None


class InterviewCreate(RequestModel):
    job_id: str = Field(min_length=1)
    user_id: str = Field(min_length=1)
    application_id: str = Field(min_length=1)
    date: datetime
    notes: Optional[str] = None


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------

class ExperienceEntry(RequestModel):
    company: str = ""
    position: str = ""
    start: str = ""
    end: str = ""
    description: str = ""


class EducationEntry(RequestModel):
    institution: str = ""
    degree: str = ""
    year: str = ""


class SocialLinks(RequestModel):
    linkedin: str = Field(default="", pattern=URL_PATTERN)
    github: str = Field(default="", pattern=URL_PATTERN)
    twitter: str = Field(default="", pattern=URL_PATTERN)
    portfolio: str = Field(default="", pattern=URL_PATTERN)


class UserProfileUpdate(RequestModel):
    name: str = Field(min_length=2)
    title: str = Field(min_length=1)
    location: str = Field(min_length=1)
    phone: Optional[str] = Field(default="", pattern=E164_PATTERN)
    about: Optional[str] = ""
    skills: List[str] = Field(default_factory=list)
    experience: Optional[List[ExperienceEntry]] = None
    education: Optional[List[EducationEntry]] = None
    social_links: Optional[SocialLinks] = None
    linkedin: str = Field(default="", pattern=URL_PATTERN)
    github: str = Field(default="", pattern=URL_PATTERN)
    twitter: str = Field(default="", pattern=URL_PATTERN)
    portfolio: str = Field(default="", pattern=URL_PATTERN)


class CompanyProfileUpdate(RequestModel):
    company_name: str = Field(min_length=2)
    industry: str
    company_type: str
    company_size: str
    contact_email: str = Field(pattern=EMAIL_PATTERN)
    tagline: str = ""
    description: str = ""
    website: str = Field(default="", pattern=URL_PATTERN)
    headquarters: str = ""
    company_address: Optional[str] = None
    founded: str = Field(default="", pattern=r'^(\d{4})?$')
    specialties: Union[str, List[str]] = Field(default_factory=list)
    contact_phone: str = ""
    mission: str = ""
    vision: str = ""


# ---------------------------------------------------------------------------
# Notifications, searches and AI
# ---------------------------------------------------------------------------

class NotificationDelete(RequestModel):
    id: Optional[str] = None


class SearchCreate(RequestModel):
    query: Optional[str] = None


class AboutRequest(RequestModel):
    job_title: Optional[str] = None
    skills: Optional[Union[str, List[str]]] = None


class CareerRequest(RequestModel):
    skills: List[str] = Field(default_factory=list)
    experience: List[ExperienceEntry] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------

class AdminAccountUpdate(RequestModel):
    email: Optional[str] = Field(default=None, pattern=EMAIL_PATTERN)
    is_active: Optional[bool] = None
    is_verified: Optional[bool] = None
    role: Optional[str] = None


class AdminJobUpdate(JobUpdate):
    pass


class BulkToggle(RequestModel):
    """Shape checks for ids and is_active happen in the service."""

    ids: Any = None
    is_active: Any = None
