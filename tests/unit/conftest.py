import asyncio
from typing import Dict, List, Tuple

import pytest

from staging_service.application.usecase.stage_images import StageImagesUseCase
from staging_service.domain.entity.errors import StorageError
from staging_service.domain.entity.staging import GeneratedImage, UploadedImage
from staging_service.domain.repository.artifact_store import RESULTS, ArtifactStore
from staging_service.domain.repository.generation_client import GenerationClient
from staging_service.domain.service.prompt_composer import VARIATION_CLAUSES
from staging_service.infrastructure.style.catalog import InMemoryStyleCatalog


def variation_of(prompt: str) -> int:
    for index in range(len(VARIATION_CLAUSES) - 1, 0, -1):
        if VARIATION_CLAUSES[index] in prompt:
            return index
    return 0


def make_image(name: str, data: bytes = None, mime_type: str = "image/jpeg") -> UploadedImage:
    return UploadedImage(data=data if data is not None else name.encode(), mime_type=mime_type, display_name=name)


class ScriptedGenerationClient(GenerationClient):
    """Fake upstream keyed by (source bytes, variation index).

    A script entry may be an exception to raise, a float delay, or a list of
    such actions consumed one per call.
    """

    def __init__(self, delay: float = 0.0):
        self.delay = delay
        self.script: Dict[Tuple[bytes, int], object] = {}
        self.calls: List[Tuple[bytes, int]] = []
        self.prompts: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.cancelled = 0

    @property
    def model(self) -> str:
        return "scripted"

    async def generate(self, image_bytes, mime_type, prompt, deadline):
        variation = variation_of(prompt)
        key = (image_bytes, variation)
        self.calls.append(key)
        self.prompts.append(prompt)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            action = self.script.get(key)
            if isinstance(action, list):
                action = action.pop(0) if action else None
            delay = action if isinstance(action, (int, float)) else self.delay
            if delay:
                await asyncio.sleep(delay)
            if isinstance(action, Exception):
                raise action
            return GeneratedImage(
                data=b"staged:" + image_bytes + b":" + str(variation).encode(),
                mime_type="image/png",
                caption=f"variation {variation}",
            )
        except asyncio.CancelledError:
            self.cancelled += 1
            raise
        finally:
            self.in_flight -= 1


class MemoryArtifactStore(ArtifactStore):
    def __init__(self):
        self.puts: List[Tuple[str, bytes, str]] = []
        self.fail_categories = set()
        self.fail_data = set()

    async def put(self, data, mime_type, category=RESULTS):
        if category in self.fail_categories or data in self.fail_data:
            raise StorageError("disk full")
        self.puts.append((category, data, mime_type))
        return f"mem://{category}/{len(self.puts)}"


@pytest.fixture
def fake_client():
    return ScriptedGenerationClient()


@pytest.fixture
def memory_store():
    return MemoryArtifactStore()


@pytest.fixture
def catalog():
    return InMemoryStyleCatalog()


@pytest.fixture
def make_use_case(fake_client, memory_store, catalog):
    def factory(**kwargs):
        options = dict(
            generation_client=fake_client,
            artifact_store=memory_store,
            style_catalog=catalog,
            variation_count=3,
            max_concurrency=4,
            budget_seconds=5.0,
            cancel_grace_seconds=0.5,
            retry_backoff_seconds=0.0,
        )
        options.update(kwargs)
        return StageImagesUseCase(**options)

    return factory
