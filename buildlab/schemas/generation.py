"""Generation request, context and bundle schemas."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class FocusArea(str, Enum):
    """Caller-selected modifier narrowing agent output toward a goal."""

    BALANCED = "balanced"
    BUDGET = "budget"
    SPEED = "speed"
    QUALITY = "quality"
    MVP = "mvp"
    ENTERPRISE = "enterprise"


class GenerationSection(str, Enum):
    """Independently selectable outputs, named as the web client sends them."""

    MARKET_RESEARCH = "marketResearch"
    PROJECT_CHARTER = "projectCharter"
    PRD = "prd"
    TECH_SPEC = "techSpec"
    CODE_PROTOTYPE = "codePrototype"


class BundleStatus(str, Enum):
    """Generated bundle lifecycle: pending -> processing -> completed | failed."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class GenerationOptions(BaseModel):
    """Feature toggles and prompt modifiers for one generation request.

    Accepts the web client's camelCase keys as well as snake_case names.
    ``generateOnly`` narrows the request to a single section.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    market_research: bool = True
    project_charter: bool = True
    prd: bool = True
    tech_spec: bool = True
    code_prototype: bool = False
    custom_instructions: str = ""
    focus_area: FocusArea = FocusArea.BALANCED
    generate_only: GenerationSection | None = None

    @field_validator("focus_area", mode="before")
    @classmethod
    def unknown_focus_is_balanced(cls, v: Any) -> Any:
        if v is None:
            return FocusArea.BALANCED
        if isinstance(v, str) and v not in {f.value for f in FocusArea}:
            return FocusArea.BALANCED
        return v

    @field_validator("custom_instructions", mode="before")
    @classmethod
    def none_is_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @model_validator(mode="after")
    def apply_generate_only(self) -> "GenerationOptions":
        if self.generate_only is not None:
            only = self.generate_only
            self.market_research = only is GenerationSection.MARKET_RESEARCH
            self.project_charter = only is GenerationSection.PROJECT_CHARTER
            self.prd = only is GenerationSection.PRD
            self.tech_spec = only is GenerationSection.TECH_SPEC
            self.code_prototype = only is GenerationSection.CODE_PROTOTYPE
        return self

    @property
    def any_selected(self) -> bool:
        return any(
            (
                self.market_research,
                self.project_charter,
                self.prd,
                self.tech_spec,
                self.code_prototype,
            )
        )


class GenerationRequest(BaseModel):
    """An accepted request to generate documents for one build request."""

    build_request_id: str
    user_id: str
    options: GenerationOptions = Field(default_factory=GenerationOptions)


class ProjectContext(BaseModel):
    """Read-only projection of the source proposal, shared by every agent prompt."""

    model_config = ConfigDict(frozen=True)

    build_request_id: str
    title: str
    category: str = ""
    description: str = ""
    short_description: str = ""
    target_audience: str | None = None
    features: tuple[str, ...] = ()
    creator: str | None = None


class GeneratedDocumentBundle(BaseModel):
    """Documents, code files and publish URLs generated for one proposal."""

    model_config = ConfigDict(from_attributes=True)

    project_slug: str
    build_request_id: str
    user_id: str | None = None
    market_research: str = ""
    project_charter: str = ""
    prd: str = ""
    tech_spec: str = ""
    code_files: dict[str, str] = Field(default_factory=dict)
    preview_url: str | None = None
    github_url: str | None = None
    status: BundleStatus = BundleStatus.PENDING
    error: str | None = None

    @field_validator("market_research", "project_charter", "prd", "tech_spec", mode="before")
    @classmethod
    def none_document_is_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("code_files", mode="before")
    @classmethod
    def none_files_is_empty(cls, v: Any) -> Any:
        return {} if v is None else v


@dataclass(frozen=True)
class PublishArtifact:
    """One file handed to a publisher."""

    path: str
    content: str
    content_type: str


@dataclass(frozen=True)
class PublishOutcome:
    """Result of one best-effort publishing step."""

    url: str | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.url is not None and self.error is None

    @classmethod
    def success(cls, url: str) -> "PublishOutcome":
        return cls(url=url)

    @classmethod
    def failure(cls, error: str) -> "PublishOutcome":
        return cls(error=error)


# === HTTP payloads ===


class GenerateRequestBody(BaseModel):
    """Body of POST /generate."""

    build_request_id: str
    options: GenerationOptions | None = None


class DocumentPreviews(BaseModel):
    """Truncated document previews returned to the caller."""

    market_research: str
    project_charter: str
    prd: str
    tech_spec: str


class GeneratedProjectSummary(BaseModel):
    preview_url: str | None
    github_url: str | None
    documents: DocumentPreviews


class GenerateResponse(BaseModel):
    """Body of a successful POST /generate."""

    success: bool = True
    project: GeneratedProjectSummary


class ProjectRead(GeneratedDocumentBundle):
    """Polling view of a generated project."""

    pass
