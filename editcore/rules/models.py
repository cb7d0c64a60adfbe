from pydantic import BaseModel, Field, field_validator


class ProjectRules(BaseModel):
    slug: str = "editcore"
    rules_version: str = "1"


class IndentationRules(BaseModel):
    step_px: int = Field(default=20, gt=0)
    min_px: int = Field(default=0, ge=0)


class LinkRules(BaseModel):
    default_scheme: str = "https://"
    accepted_schemes: list[str] = Field(default_factory=lambda: ["http://", "https://"])

    @field_validator("default_scheme")
    @classmethod
    def scheme_has_separator(cls, value: str) -> str:
        if not value.endswith("://"):
            raise ValueError("default_scheme must end with '://'")
        return value


class ImageAlignmentRules(BaseModel):
    left: dict[str, str] = Field(
        default_factory=lambda: {"display": "block", "float": "left", "margin": "0 15px 10px 0"}
    )
    center: dict[str, str] = Field(
        default_factory=lambda: {"display": "block", "float": "none", "margin": "10px auto"}
    )
    right: dict[str, str] = Field(
        default_factory=lambda: {"display": "block", "float": "right", "margin": "0 0 10px 15px"}
    )

    def for_direction(self, direction: str) -> dict[str, str]:
        return dict(getattr(self, direction))


class DocumentRules(BaseModel):
    reset_template: str = "<h1>Rich Text Editor</h1><p>Start typing here...</p>"


class HistoryRules(BaseModel):
    limit: int = Field(default=200, gt=0)


class ApiRules(BaseModel):
    session_ttl_minutes: int = Field(default=120, gt=0)
    max_sessions: int = Field(default=1000, gt=0)


class EditorRules(BaseModel):
    project: ProjectRules = Field(default_factory=ProjectRules)
    indentation: IndentationRules = Field(default_factory=IndentationRules)
    links: LinkRules = Field(default_factory=LinkRules)
    image_alignment: ImageAlignmentRules = Field(default_factory=ImageAlignmentRules)
    document: DocumentRules = Field(default_factory=DocumentRules)
    history: HistoryRules = Field(default_factory=HistoryRules)
    api: ApiRules = Field(default_factory=ApiRules)


DEFAULT_RULES = EditorRules()
