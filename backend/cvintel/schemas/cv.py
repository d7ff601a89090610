from pydantic import BaseModel, Field


class WorkExperience(BaseModel):
    title: str = ""
    company: str = ""
    dates: str = ""
    bullet_points: list[str] = Field(default_factory=list)


class ParsedCV(BaseModel):
    """Structured CV as extracted by the parse stage. Never edited afterwards."""

    professional_summary: str = ""
    work_experience: list[WorkExperience] = Field(default_factory=list)
    education: str = ""
    skills: list[str] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)
    tools_and_technologies: list[str] = Field(default_factory=list)
