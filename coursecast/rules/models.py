from pydantic import BaseModel, Field


class SchedulingRules(BaseModel):
    audience_roles: list[str] = Field(default_factory=lambda: ["STUDENT"])
    max_recipients: int = Field(default=200, ge=1)
    claim_ttl_seconds: int = Field(default=900, ge=1)
    publish_grace_seconds: int = Field(default=0, ge=0)


class EmailRules(BaseModel):
    site_name: str = "Coursecast"
    default_sender_name: str = "Staff"
    default_recipient_name: str = "Student"
    max_error_reasons: int = Field(default=20, ge=0)


class OpsRules(BaseModel):
    required_env: list[str] = Field(default_factory=list)


class Rules(BaseModel):
    scheduling: SchedulingRules = Field(default_factory=SchedulingRules)
    email: EmailRules = Field(default_factory=EmailRules)
    ops: OpsRules = Field(default_factory=OpsRules)
