"""Pydantic models for the health report API."""

from pydantic import BaseModel, Field

from food_health.domain.health import HealthReport, ProductMeta


class ProductMetaPayload(BaseModel):
    """Product metadata payload."""

    category: str | None = None
    name: str | None = None
    brand: str | None = None
    is_ultra_processed: bool = False

    def to_domain(self) -> ProductMeta:
        """Convert to the domain metadata type."""
        return ProductMeta(
            category=self.category,
            name=self.name,
            brand=self.brand,
            is_ultra_processed=self.is_ultra_processed,
        )


class HealthReportRequest(BaseModel):
    """Request body for an ad-hoc health report."""

    nutrition: dict[str, object] = Field(default_factory=dict)
    ingredients_text: str | None = None
    grams: float | None = Field(default=None, gt=0)
    meta: ProductMetaPayload = Field(default_factory=ProductMetaPayload)
    additives: list[str] | None = None


class HealthFlagPayload(BaseModel):
    """Health flag in a report response."""

    key: str
    label: str
    severity: str
    description: str | None = None


class HealthReportResponse(BaseModel):
    """Health report response body."""

    per_100g: dict[str, float]
    per_serving: dict[str, float]
    grams: float
    flags: list[HealthFlagPayload]
    score: int
    score_ten: int
    stars: float
    rating: str

    @classmethod
    def from_domain(cls, report: HealthReport) -> "HealthReportResponse":
        """Build a response from a domain report."""
        return cls(
            per_100g=report.per_100g.as_dict(),
            per_serving=report.per_serving.as_dict(),
            grams=report.grams,
            flags=[
                HealthFlagPayload(
                    key=flag.key,
                    label=flag.label,
                    severity=flag.severity,
                    description=flag.description,
                )
                for flag in report.flags
            ],
            score=report.score,
            score_ten=report.score_ten,
            stars=report.stars,
            rating=report.rating,
        )
