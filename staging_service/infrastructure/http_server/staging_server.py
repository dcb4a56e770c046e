"""Staging HTTP Server - Infrastructure Layer"""

import base64
import binascii
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncGenerator, Optional, Sequence

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

# 导入应用层用例
from ...application.usecase.stage_images import StageImagesUseCase

# 导入领域实体
from ...domain.entity.errors import AuthenticationError, StagingError, ValidationError
from ...domain.entity.staging import CallerIdentity, GenerationRequest, UploadedImage
from ...domain.repository.identity_resolver import IdentityResolver
from ...domain.repository.style_catalog import StyleCatalog
from .schemas import StageRequestBody, StageResponseBody, StylePayload

logger = logging.getLogger(__name__)


def decode_image_payload(data: str, label: str) -> bytes:
    """解码 base64 (支持 data: URL)

    Raises:
        ValidationError: 不是合法的 base64
    """
    if data.startswith("data:") and "," in data:
        data = data.split(",", 1)[1]
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError(f"Image {label} is not valid base64 data")


def to_domain_request(body: StageRequestBody) -> GenerationRequest:
    """转换 HTTP 请求体为领域实体"""
    images = []
    for position, payload in enumerate(body.images, start=1):
        label = payload.name or f"#{position}"
        images.append(
            UploadedImage(
                data=decode_image_payload(payload.base64, label),
                mime_type=payload.mime_type,
                display_name=payload.name or f"image-{position}",
            )
        )
    return GenerationRequest(
        images=tuple(images),
        style_id=body.style_id or None,
        custom_prompt=body.custom_prompt,
    )


def create_app(
    stage_use_case: StageImagesUseCase,
    style_catalog: StyleCatalog,
    identity_resolver: Optional[IdentityResolver] = None,
    artifact_dir: Optional[Path] = None,
    artifact_url: str = "/artifacts",
    resources: Sequence[Any] = (),
) -> FastAPI:
    """创建 HTTP 应用

    Args:
        stage_use_case: 批量布置用例
        style_catalog: 风格目录
        identity_resolver: 身份解析器 (None 表示允许匿名调用)
        artifact_dir: 本地产物目录 (挂载为静态文件)
        artifact_url: 本地产物的 URL 前缀
        resources: 关闭时需要调用 close() 的对象

    Returns:
        FastAPI 应用
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("Staging HTTP server started")
        yield
        for resource in resources:
            try:
                await resource.close()
            except Exception as e:
                logger.error(f"Error closing {type(resource).__name__}: {e}")
        logger.info("Staging HTTP server stopped")

    app = FastAPI(title="Room Staging Service", lifespan=lifespan)

    if artifact_dir is not None:
        Path(artifact_dir).mkdir(parents=True, exist_ok=True)
        app.mount(artifact_url, StaticFiles(directory=str(artifact_dir)), name="artifacts")

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        logger.info(f"Invalid request: {exc.message}")
        return JSONResponse({"error": exc.message}, status_code=400)

    @app.exception_handler(RequestValidationError)
    async def handle_malformed_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        message = errors[0].get("msg", "Malformed request body") if errors else "Malformed request body"
        logger.info(f"Malformed request body: {message}")
        return JSONResponse({"error": message}, status_code=400)

    @app.exception_handler(AuthenticationError)
    async def handle_auth_error(request: Request, exc: AuthenticationError) -> JSONResponse:
        return JSONResponse({"error": exc.message}, status_code=401)

    @app.exception_handler(StagingError)
    async def handle_staging_error(request: Request, exc: StagingError) -> JSONResponse:
        logger.error(f"Staging failed: {exc.kind.value}: {exc.message}")
        return JSONResponse({"error": exc.message}, status_code=500)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Unexpected error: {exc}", exc_info=exc)
        return JSONResponse({"error": "Internal server error"}, status_code=500)

    async def current_identity(request: Request) -> Optional[CallerIdentity]:
        if identity_resolver is None:
            return None
        header = request.headers.get("Authorization", "")
        token = header[7:].strip() if header.lower().startswith("bearer ") else ""
        if not token:
            raise AuthenticationError("Unauthorized - please refresh page")
        return await identity_resolver.resolve(token)

    @app.get("/health")
    async def health() -> JSONResponse:
        return JSONResponse({"status": "ok"})

    @app.get("/api/styles")
    async def list_styles() -> JSONResponse:
        styles = [
            StylePayload.from_style(style).model_dump(by_alias=True)
            for style in style_catalog.list_styles()
        ]
        return JSONResponse({"styles": styles})

    @app.post("/api/stage")
    async def stage(
        body: StageRequestBody,
        identity: Optional[CallerIdentity] = Depends(current_identity),
    ) -> JSONResponse:
        logger.info(
            f"Received stage request: images={len(body.images)}, styleId={body.style_id}"
        )
        # 转换请求 -> 执行用例 -> 转换响应
        request = to_domain_request(body)
        batch = await stage_use_case.execute(request, identity=identity)
        return JSONResponse(StageResponseBody.from_batch(batch).model_dump(by_alias=True))

    return app
