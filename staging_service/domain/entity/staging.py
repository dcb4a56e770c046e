"""Staging Entities - Domain Layer"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union
from uuid import uuid4

from .errors import ErrorKind


@dataclass(frozen=True)
class UploadedImage:
    """上传的原始图片 (提交后不可变)"""

    data: bytes
    mime_type: str
    display_name: str

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class StyleDefinition:
    """布置风格定义 (只读参考数据)"""

    id: str
    prompt_template: str
    name: str = ""
    description: str = ""
    emoji: str = ""


@dataclass(frozen=True)
class CallerIdentity:
    """已验证的调用方身份"""

    user_id: str
    email: Optional[str] = None


@dataclass
class GenerationRequest:
    """批量生成请求实体（聚合根）

    Validation happens in the orchestrator, so that a bad request is rejected
    with a ValidationError before any task is created.
    """

    images: Tuple[UploadedImage, ...] = ()
    style_id: Optional[str] = None
    custom_prompt: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid4()))

    def __post_init__(self) -> None:
        self.images = tuple(self.images)

    @property
    def has_custom_prompt(self) -> bool:
        return bool(self.custom_prompt)


@dataclass(frozen=True)
class GenerationTask:
    """单个 (图片, 变体) 生成任务"""

    image_index: int
    variation_index: int
    prompt: str
    source_image: UploadedImage

    @property
    def key(self) -> Tuple[int, int]:
        return (self.image_index, self.variation_index)


@dataclass(frozen=True)
class GeneratedImage:
    """上游返回的生成结果"""

    data: bytes
    mime_type: str
    caption: Optional[str] = None


@dataclass(frozen=True)
class Success:
    artifact_ref: str
    caption: Optional[str] = None


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    message: str = ""


TaskOutcome = Union[Success, Failure]


@dataclass(frozen=True)
class VariationResult:
    """单个变体的结果；失败时 artifact_ref 为空且 error_kind 有值"""

    variation_index: int
    artifact_ref: Optional[str] = None
    caption: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.artifact_ref is not None

    @classmethod
    def from_outcome(cls, variation_index: int, outcome: TaskOutcome) -> "VariationResult":
        if isinstance(outcome, Success):
            return cls(
                variation_index=variation_index,
                artifact_ref=outcome.artifact_ref,
                caption=outcome.caption,
            )
        return cls(
            variation_index=variation_index,
            error_kind=outcome.kind,
            error=outcome.message,
        )


@dataclass(frozen=True)
class ImageResult:
    """单张原图的结果"""

    original_name: str
    original_artifact_ref: Optional[str]
    variations: Tuple[VariationResult, ...] = ()


@dataclass(frozen=True)
class BatchResult:
    """批量结果 (顺序与输入图片一致)"""

    request_id: str
    results: Tuple[ImageResult, ...] = ()

    def __len__(self) -> int:
        return len(self.results)

    def __getitem__(self, index: int) -> ImageResult:
        return self.results[index]

    @property
    def failed_count(self) -> int:
        return sum(
            1 for image in self.results for v in image.variations if not v.succeeded
        )
