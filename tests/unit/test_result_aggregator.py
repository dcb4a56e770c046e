import random

from staging_service.domain.entity.errors import ErrorKind
from staging_service.domain.entity.staging import (
    Failure,
    GenerationRequest,
    GenerationTask,
    Success,
)
from staging_service.domain.service.result_aggregator import assemble

from conftest import make_image


def _request(*names):
    return GenerationRequest(images=tuple(make_image(n) for n in names), style_id="luxury")


def _outcomes(request, variations):
    pairs = []
    for i, image in enumerate(request.images):
        for v in variations:
            task = GenerationTask(image_index=i, variation_index=v, prompt=f"p{v}", source_image=image)
            if (i + v) % 3 == 0:
                outcome = Failure(ErrorKind.UPSTREAM_NO_IMAGE, "No image")
            else:
                outcome = Success(artifact_ref=f"ref-{i}-{v}", caption=f"c{v}")
            pairs.append((task, outcome))
    return pairs


def test_assemble_preserves_input_order_and_names():
    request = _request("kitchen.jpg", "bedroom.jpg", "hall.jpg")
    pairs = _outcomes(request, [0, 1, 2])

    batch = assemble(request, ["o0", "o1", "o2"], pairs, [0, 1, 2])

    assert len(batch) == 3
    assert [r.original_name for r in batch.results] == ["kitchen.jpg", "bedroom.jpg", "hall.jpg"]
    assert [r.original_artifact_ref for r in batch.results] == ["o0", "o1", "o2"]
    for image in batch.results:
        assert [v.variation_index for v in image.variations] == [0, 1, 2]


def test_assemble_is_independent_of_completion_order():
    request = _request("a.jpg", "b.jpg", "c.jpg", "d.jpg")
    pairs = _outcomes(request, [0, 1, 2])
    expected = assemble(request, ["o"] * 4, pairs, [0, 1, 2])

    rng = random.Random(1234)
    for _ in range(50):
        shuffled = list(pairs)
        rng.shuffle(shuffled)
        assert assemble(request, ["o"] * 4, shuffled, [0, 1, 2]) == expected


def test_failures_keep_their_slot():
    request = _request("a.jpg")
    pairs = _outcomes(request, [0, 1, 2])

    batch = assemble(request, [None], pairs, [0, 1, 2])
    failed = batch[0].variations[0]

    assert failed.artifact_ref is None
    assert failed.error_kind == ErrorKind.UPSTREAM_NO_IMAGE
    assert failed.error == "No image"
    assert batch[0].variations[1].artifact_ref == "ref-0-1"
    assert batch[0].variations[1].caption == "c1"
    assert batch.failed_count == 1


def test_missing_outcome_is_reported_not_dropped():
    request = _request("a.jpg", "b.jpg")
    pairs = [p for p in _outcomes(request, [0, 1]) if p[0].key != (1, 1)]

    batch = assemble(request, ["o0", "o1"], pairs, [0, 1])

    assert len(batch[1].variations) == 2
    assert batch[1].variations[1].error_kind == ErrorKind.INTERNAL
