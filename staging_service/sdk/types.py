"""Staging SDK Types"""

import base64
import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union


@dataclass
class StageImage:
    """An image to upload."""
    data: bytes
    mime_type: str = "image/jpeg"
    name: str = ""

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "StageImage":
        path = Path(path)
        mime_type = mimetypes.guess_type(path.name)[0] or "image/jpeg"
        return cls(data=path.read_bytes(), mime_type=mime_type, name=path.name)

    def to_payload(self) -> Dict[str, str]:
        return {
            "base64": base64.b64encode(self.data).decode("ascii"),
            "mimeType": self.mime_type,
            "name": self.name,
        }


@dataclass
class Variation:
    """One staged variation, or the reason it failed."""
    variation_index: int
    artifact_ref: Optional[str] = None
    caption: Optional[str] = None
    error_kind: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.artifact_ref is not None


@dataclass
class StagedImage:
    original_name: str
    original_artifact_ref: Optional[str] = None
    variations: List[Variation] = field(default_factory=list)


@dataclass
class StageResult:
    """Response of POST /api/stage."""
    request_id: str = ""
    results: List[StagedImage] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "StageResult":
        return cls(
            request_id=data.get("requestId", ""),
            results=[
                StagedImage(
                    original_name=item.get("originalName", ""),
                    original_artifact_ref=item.get("originalArtifactRef"),
                    variations=[
                        Variation(
                            variation_index=v.get("variationIndex", 0),
                            artifact_ref=v.get("artifactRef"),
                            caption=v.get("caption"),
                            error_kind=v.get("errorKind"),
                            error=v.get("error"),
                        )
                        for v in item.get("variations", [])
                    ],
                )
                for item in data.get("results", [])
            ],
        )


@dataclass
class StyleInfo:
    """Describes an available staging style."""
    id: str
    name: str
    description: str = ""
    emoji: str = ""
