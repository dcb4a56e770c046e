"""HTTP wire schemas (camelCase on the wire, snake_case in Python)."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ...domain.entity.staging import BatchResult, StyleDefinition


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class UploadedImagePayload(_CamelModel):
    base64: str = Field(..., description="Base64 image data, optionally as a data: URL")
    mime_type: str = Field(default="image/jpeg")
    name: str = Field(default="")


class StageRequestBody(_CamelModel):
    images: List[UploadedImagePayload] = Field(default_factory=list)
    style_id: Optional[str] = None
    custom_prompt: Optional[str] = None


class VariationPayload(_CamelModel):
    variation_index: int
    artifact_ref: Optional[str] = None
    caption: Optional[str] = None
    error_kind: Optional[str] = None
    error: Optional[str] = None


class ImageResultPayload(_CamelModel):
    original_name: str
    original_artifact_ref: Optional[str] = None
    variations: List[VariationPayload] = Field(default_factory=list)


class StageResponseBody(_CamelModel):
    request_id: str
    results: List[ImageResultPayload] = Field(default_factory=list)

    @classmethod
    def from_batch(cls, batch: BatchResult) -> "StageResponseBody":
        return cls(
            request_id=batch.request_id,
            results=[
                ImageResultPayload(
                    original_name=image.original_name,
                    original_artifact_ref=image.original_artifact_ref,
                    variations=[
                        VariationPayload(
                            variation_index=v.variation_index,
                            artifact_ref=v.artifact_ref,
                            caption=v.caption,
                            error_kind=v.error_kind.value if v.error_kind else None,
                            error=v.error,
                        )
                        for v in image.variations
                    ],
                )
                for image in batch.results
            ],
        )


class StylePayload(_CamelModel):
    id: str
    name: str
    description: str = ""
    emoji: str = ""

    @classmethod
    def from_style(cls, style: StyleDefinition) -> "StylePayload":
        return cls(
            id=style.id,
            name=style.name or style.id,
            description=style.description,
            emoji=style.emoji,
        )
