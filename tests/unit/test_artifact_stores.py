import httpx
import pytest

from staging_service.domain.entity.errors import StorageError
from staging_service.domain.repository.artifact_store import extension_for
from staging_service.infrastructure.storage.local_store import LocalArtifactStore
from staging_service.infrastructure.storage.supabase_store import SupabaseArtifactStore


def test_extension_for():
    assert extension_for("image/jpeg") == "jpg"
    assert extension_for("image/png") == "png"
    assert extension_for("image/webp; charset=binary") == "webp"
    assert extension_for("garbage") == "png"


@pytest.mark.asyncio
async def test_local_store_writes_under_category(tmp_path):
    store = LocalArtifactStore(tmp_path, public_base_url="/artifacts/")

    ref = await store.put(b"jpeg-bytes", "image/jpeg", "uploads")

    assert ref.startswith("/artifacts/uploads/")
    assert ref.endswith(".jpg")
    stored = tmp_path / "uploads" / ref.rsplit("/", 1)[1]
    assert stored.read_bytes() == b"jpeg-bytes"


@pytest.mark.asyncio
async def test_local_store_returns_unique_refs(tmp_path):
    store = LocalArtifactStore(tmp_path)

    first = await store.put(b"a", "image/png")
    second = await store.put(b"a", "image/png")

    assert first != second


@pytest.mark.asyncio
async def test_local_store_failure_raises_storage_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    store = LocalArtifactStore(blocker)

    with pytest.raises(StorageError):
        await store.put(b"a", "image/png")


@pytest.mark.asyncio
async def test_supabase_store_uploads_and_returns_public_url():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["headers"] = request.headers
        seen["body"] = request.content
        return httpx.Response(200, json={"Key": "staging/results/x.png"})

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    store = SupabaseArtifactStore("https://proj.supabase.co/", "service-key", bucket="staging", client=client)

    ref = await store.put(b"png-bytes", "image/png")

    assert seen["url"].startswith("https://proj.supabase.co/storage/v1/object/staging/results/")
    assert seen["headers"]["authorization"] == "Bearer service-key"
    assert seen["headers"]["content-type"] == "image/png"
    assert seen["body"] == b"png-bytes"
    path = seen["url"].split("/storage/v1/object/staging/", 1)[1]
    assert ref == f"https://proj.supabase.co/storage/v1/object/public/staging/{path}"
    await store.close()


@pytest.mark.asyncio
async def test_supabase_store_error_status_raises_storage_error():
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(403, text="denied")))
    store = SupabaseArtifactStore("https://proj.supabase.co", "bad-key", client=client)

    with pytest.raises(StorageError, match="403"):
        await store.put(b"x", "image/png")
    await store.close()


@pytest.mark.asyncio
async def test_supabase_store_transport_error_raises_storage_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    store = SupabaseArtifactStore("https://proj.supabase.co", "key", client=client)

    with pytest.raises(StorageError):
        await store.put(b"x", "image/png")
    await store.close()
