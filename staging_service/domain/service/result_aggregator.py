"""Result Aggregator Domain Service - Domain Layer"""

from collections import defaultdict
from typing import Dict, Iterable, Optional, Sequence, Tuple

from ..entity.errors import ErrorKind
from ..entity.staging import (
    BatchResult,
    Failure,
    GenerationRequest,
    GenerationTask,
    ImageResult,
    TaskOutcome,
    VariationResult,
)

MISSING_OUTCOME = Failure(ErrorKind.INTERNAL, "no outcome recorded")


def assemble(
    request: GenerationRequest,
    persisted_originals: Sequence[Optional[str]],
    outcomes: Iterable[Tuple[GenerationTask, TaskOutcome]],
    variation_indices: Sequence[int],
) -> BatchResult:
    """把任务结果还原成与输入顺序一致的嵌套结构

    The output depends only on the arguments, never on the order in which
    ``outcomes`` are supplied. Every (image, variation) slot is present.

    Args:
        request: 原始请求 (提供图片顺序与名称)
        persisted_originals: 每张原图的存储引用，按输入顺序
        outcomes: (任务, 结果) 对，顺序任意
        variation_indices: 每张图片应有的变体索引

    Returns:
        批量结果
    """
    grouped: Dict[int, Dict[int, TaskOutcome]] = defaultdict(dict)
    for task, outcome in outcomes:
        grouped[task.image_index][task.variation_index] = outcome

    ordered_indices = sorted(set(variation_indices))
    results = []
    for image_index, image in enumerate(request.images):
        by_variation = grouped.get(image_index, {})
        variations = tuple(
            VariationResult.from_outcome(v, by_variation.get(v, MISSING_OUTCOME))
            for v in ordered_indices
        )
        original_ref = (
            persisted_originals[image_index]
            if image_index < len(persisted_originals)
            else None
        )
        results.append(
            ImageResult(
                original_name=image.display_name,
                original_artifact_ref=original_ref,
                variations=variations,
            )
        )

    return BatchResult(request_id=request.id, results=tuple(results))
