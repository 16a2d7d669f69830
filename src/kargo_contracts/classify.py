"""Classification request/response models."""

from pydantic import BaseModel, Field


class ProductInput(BaseModel):
    """Product data sent for HS code classification."""

    title: str = Field(..., min_length=1)
    description: str = ""
    material: str | None = None
    product_type: str | None = None
    vendor: str | None = None
    origin_country: str | None = None


class ClassifyRequest(BaseModel):
    product: ProductInput


class HSCodeAlternative(BaseModel):
    """A runner-up HS code suggested by the classifier."""

    code: str
    confidence: float = Field(..., ge=0.0, le=100.0)
    reason: str = ""


class ClassifyResponse(BaseModel):
    """Result of a single product classification."""

    hs_code: str
    confidence: float = Field(..., ge=0.0, le=100.0)
    description: str = ""
    reasoning: str = ""
    chapter: str = ""
    alternatives: list[HSCodeAlternative] = Field(default_factory=list)
    requires_review: bool = False


class HealthResponse(BaseModel):
    """Classifier service health status."""

    status: str = "ok"
    version: str | None = None
    model_name: str | None = None
