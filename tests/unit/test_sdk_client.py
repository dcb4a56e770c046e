import base64
import json

import httpx
import pytest

from staging_service.sdk import StageImage, StagingAPIError, StagingClient


STAGE_RESPONSE = {
    "requestId": "req-1",
    "results": [
        {
            "originalName": "room.jpg",
            "originalArtifactRef": "/artifacts/uploads/a.jpg",
            "variations": [
                {"variationIndex": 0, "artifactRef": "/artifacts/results/b.png", "caption": "Nice"},
                {"variationIndex": 1, "artifactRef": None, "errorKind": "UpstreamNoImage", "error": "No image"},
            ],
        }
    ],
}


def test_stage_sends_payload_and_parses_result():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["auth"] = request.headers.get("authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=STAGE_RESPONSE)

    client = StagingClient("http://stager/", api_key="jwt", transport=httpx.MockTransport(handler))

    result = client.stage([StageImage(data=b"img", mime_type="image/jpeg", name="room.jpg")], style_id="coastal")

    assert seen["path"] == "/api/stage"
    assert seen["auth"] == "Bearer jwt"
    assert seen["body"] == {
        "images": [{"base64": base64.b64encode(b"img").decode(), "mimeType": "image/jpeg", "name": "room.jpg"}],
        "styleId": "coastal",
    }
    assert result.request_id == "req-1"
    variations = result.results[0].variations
    assert variations[0].ok and variations[0].caption == "Nice"
    assert not variations[1].ok and variations[1].error_kind == "UpstreamNoImage"


def test_stage_error_raises_api_error():
    transport = httpx.MockTransport(lambda r: httpx.Response(400, json={"error": "Please provide between 1 and 5 images"}))
    client = StagingClient(transport=transport)

    with pytest.raises(StagingAPIError) as excinfo:
        client.stage([], style_id="coastal")

    assert excinfo.value.status_code == 400
    assert excinfo.value.message == "Please provide between 1 and 5 images"


def test_list_styles_and_health():
    def handler(request):
        if request.url.path == "/health":
            return httpx.Response(200, json={"status": "ok"})
        return httpx.Response(200, json={"styles": [{"id": "luxury", "name": "Luxury", "emoji": "💎"}]})

    client = StagingClient(transport=httpx.MockTransport(handler))

    styles = client.list_styles()

    assert client.health() is True
    assert styles[0].id == "luxury"
    assert styles[0].emoji == "💎"


@pytest.mark.asyncio
async def test_astage():
    client = StagingClient(async_transport=httpx.MockTransport(lambda r: httpx.Response(200, json=STAGE_RESPONSE)))

    result = await client.astage([StageImage(data=b"img")], custom_prompt="add plants")

    assert result.results[0].original_name == "room.jpg"


def test_stage_image_from_path(tmp_path):
    photo = tmp_path / "den.png"
    photo.write_bytes(b"png")

    image = StageImage.from_path(photo)

    assert image.mime_type == "image/png"
    assert image.name == "den.png"
    assert image.data == b"png"
