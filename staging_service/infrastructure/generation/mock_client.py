from ...domain.entity.staging import GeneratedImage
from ...domain.repository.generation_client import GenerationClient


class MockGenerationClient(GenerationClient):
    """模拟生成客户端，用于本地开发与测试

    Echoes the source photo back unchanged.
    """

    def __init__(self):
        self.calls = 0

    @property
    def model(self) -> str:
        return "mock-model"

    async def generate(
        self,
        image_bytes: bytes,
        mime_type: str,
        prompt: str,
        deadline: float,
    ) -> GeneratedImage:
        self.calls += 1
        last_line = prompt.strip().splitlines()[-1] if prompt.strip() else ""
        return GeneratedImage(
            data=image_bytes,
            mime_type=mime_type,
            caption=f"Mock staging: {last_line[:80]}",
        )
