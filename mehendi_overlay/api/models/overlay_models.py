from pydantic import BaseModel, Field

from mehendi_overlay.domain.entities import BoundingBox, PatternStyle


class BoundingBoxModel(BaseModel):
    """Hand region in pixel coordinates, top-left origin."""

    x: int = Field(..., ge=0, description="Left edge of the region.")
    y: int = Field(..., ge=0, description="Top edge of the region.")
    width: int = Field(..., ge=0, description="Region width in pixels.")
    height: int = Field(..., ge=0, description="Region height in pixels.")

    @classmethod
    def from_entity(cls, box: BoundingBox | None) -> "BoundingBoxModel | None":
        if box is None:
            return None
        return cls(x=box.x, y=box.y, width=box.width, height=box.height)


class ApplyPatternRequestModel(BaseModel):
    """Request payload pointing at the hand photo to decorate."""

    image_source: str = Field(
        ...,
        min_length=1,
        description="Image URL or base64 data URI of the hand photo.",
    )
    style_name: str = Field(
        "",
        max_length=500,
        description="Free-text style; matched against arabic, mandala and geometric, otherwise floral.",
    )


class ApplyPatternResponseModel(BaseModel):
    """Composited PNG and the decisions the pipeline made."""

    image: str = Field(..., description="PNG data URI with the same pixel size as the input.")
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    style: PatternStyle = Field(..., description="Style the free-text name resolved to.")
    bounding_box: BoundingBoxModel | None = Field(
        None,
        description="Detected hand region, or null when the pattern was centred on the whole frame.",
    )
