from enum import Enum

from pydantic import BaseModel, Field, model_validator


class AtsRisk(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class Scores(BaseModel):
    structure: int = Field(ge=0, le=20)
    keyword: int = Field(ge=0, le=20)
    impact: int = Field(ge=0, le=20)
    alignment: int = Field(ge=0, le=20)
    clarity: int = Field(ge=0, le=20)
    overall: int = Field(ge=0, le=100)
    ats_risk: AtsRisk = Field(alias="atsRisk")

    class Config:
        populate_by_name = True
        use_enum_values = True

    @model_validator(mode="after")
    def check_derived_fields(self) -> "Scores":
        """overall must be the sum of the dimensions and ats_risk its tier."""
        from cvintel.services.scoring import classify_ats_risk

        total = self.structure + self.keyword + self.impact + self.alignment + self.clarity
        if self.overall != total:
            raise ValueError(f"overall is {self.overall} but the dimensions sum to {total}")

        expected = classify_ats_risk(self.overall)
        if self.ats_risk != expected:
            raise ValueError(
                f"atsRisk {self.ats_risk} does not match {expected.value} for overall {self.overall}"
            )
        return self


class Report(BaseModel):
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    ats_risk_explanation: str = ""
