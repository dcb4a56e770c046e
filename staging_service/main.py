"""Staging Service Main Entry Point"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import uvicorn

from .application.usecase.stage_images import StageImagesUseCase
from .domain.repository.artifact_store import ArtifactStore
from .domain.repository.generation_client import GenerationClient
from .domain.repository.identity_resolver import IdentityResolver
from .infrastructure.auth.supabase_auth import SupabaseIdentityResolver
from .infrastructure.config.settings import Settings, load_settings
from .infrastructure.generation.gemini_client import GeminiGenerationClient
from .infrastructure.generation.mock_client import MockGenerationClient
from .infrastructure.generation.openai_client import OpenAIGenerationClient
from .infrastructure.http_server.staging_server import create_app
from .infrastructure.storage.local_store import LocalArtifactStore
from .infrastructure.storage.supabase_store import SupabaseArtifactStore
from .infrastructure.style.catalog import InMemoryStyleCatalog, styles_from_config


def setup_logging(level: str = "INFO", log_format: str = "json") -> None:
    """配置日志系统

    Args:
        level: 日志级别
        log_format: 日志格式 (json/text)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if log_format == "json":
        # JSON 格式日志
        logging.basicConfig(
            level=log_level,
            format='{"time":"%(asctime)s","level":"%(levelname)s","name":"%(name)s","message":"%(message)s"}',
            datefmt="%Y-%m-%d %H:%M:%S",
            force=True,
        )
    else:
        # 文本格式日志
        logging.basicConfig(
            level=log_level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            force=True,
        )


def create_generation_client(config: Settings) -> GenerationClient:
    """创建上游生成客户端

    Falls back to the mock client when the selected provider is disabled or
    has no API key, so the service still starts in development.
    """
    name = config.generation.provider
    if name == "mock":
        return MockGenerationClient()

    provider_config = config.providers.get(name)
    if provider_config is None or not provider_config.enabled:
        logging.warning(f"Generation provider '{name}' is not configured. Using Mock client.")
        return MockGenerationClient()

    if not provider_config.api_key:
        logging.warning(f"Generation provider '{name}' enabled but API key not provided. Using Mock client.")
        return MockGenerationClient()

    model = config.generation.model or (provider_config.models[0] if provider_config.models else None)
    base_url = provider_config.base_url or None

    if name == "gemini":
        client = GeminiGenerationClient(api_key=provider_config.api_key, model=model, base_url=base_url)
    elif name == "openai":
        client = OpenAIGenerationClient(api_key=provider_config.api_key, model=model, base_url=base_url)
    else:
        raise ValueError(f"Unknown generation provider '{name}'")

    if not client.supports_model(client.model):
        logging.warning(f"Model '{client.model}' is not in the known list for '{name}'")
    logging.info(f"Initialized {name} generation client with model {client.model}")
    return client


def create_artifact_store(config: Settings) -> ArtifactStore:
    """创建产物存储"""
    storage = config.storage
    if storage.backend == "supabase":
        if not storage.supabase_url or not storage.service_key:
            raise ValueError("Supabase storage requires supabase_url and service_key")
        logging.info(f"Initialized Supabase artifact store (bucket={storage.bucket})")
        return SupabaseArtifactStore(
            url=storage.supabase_url,
            service_key=storage.service_key,
            bucket=storage.bucket,
        )
    if storage.backend != "local":
        raise ValueError(f"Unknown storage backend '{storage.backend}'")

    logging.info(f"Initialized local artifact store at {storage.local_dir}")
    return LocalArtifactStore(Path(storage.local_dir), public_base_url=storage.public_base_url)


def create_identity_resolver(config: Settings) -> Optional[IdentityResolver]:
    """创建身份解析器；未启用时返回 None (匿名调用)"""
    if not config.auth.enabled:
        return None
    if not config.auth.supabase_url or not config.auth.anon_key:
        raise ValueError("Auth is enabled but supabase_url / anon_key are missing")
    return SupabaseIdentityResolver(url=config.auth.supabase_url, anon_key=config.auth.anon_key)


def create_style_catalog(config: Settings) -> InMemoryStyleCatalog:
    """创建风格目录；配置中的 styles 会替换默认风格"""
    if config.styles:
        return InMemoryStyleCatalog(styles_from_config(config.styles))
    return InMemoryStyleCatalog()


def create_stage_use_case(
    config: Settings,
    generation_client: GenerationClient,
    artifact_store: ArtifactStore,
    style_catalog: InMemoryStyleCatalog,
) -> StageImagesUseCase:
    staging = config.staging
    return StageImagesUseCase(
        generation_client=generation_client,
        artifact_store=artifact_store,
        style_catalog=style_catalog,
        variation_count=staging.variation_count,
        max_concurrency=staging.max_concurrency,
        budget_seconds=staging.budget_seconds,
        cancel_grace_seconds=staging.cancel_grace_seconds,
        max_attempts=staging.max_attempts,
        retry_backoff_seconds=staging.retry_backoff_seconds,
        max_images=staging.max_images,
        max_image_bytes=staging.max_image_bytes,
    )


async def main() -> None:
    """主函数"""
    logger = logging.getLogger(__name__)
    logger.info("Starting Room Staging Service...")

    # 1. 加载配置
    try:
        config = load_settings()
        logger.info(f"Configuration loaded: HTTP port={config.server.http_port}")
    except Exception as e:
        logger.error(f"Failed to load configuration: {e}")
        sys.exit(1)

    # 2. 配置日志
    setup_logging(config.logging.level, config.logging.format)

    # 3. 创建基础设施组件
    try:
        generation_client = create_generation_client(config)
        artifact_store = create_artifact_store(config)
        identity_resolver = create_identity_resolver(config)
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    style_catalog = create_style_catalog(config)
    logger.info(f"Style catalog initialized with {len(style_catalog.list_styles())} styles")

    # 4. 创建应用用例
    stage_use_case = create_stage_use_case(config, generation_client, artifact_store, style_catalog)
    logger.info(
        f"Stage use case initialized: variations={config.staging.variation_count}, "
        f"concurrency={config.staging.max_concurrency}"
    )

    # 5. 创建 HTTP 应用
    resources = [generation_client, artifact_store]
    if identity_resolver is not None:
        resources.append(identity_resolver)
    artifact_dir = Path(config.storage.local_dir) if isinstance(artifact_store, LocalArtifactStore) else None
    app = create_app(
        stage_use_case=stage_use_case,
        style_catalog=style_catalog,
        identity_resolver=identity_resolver,
        artifact_dir=artifact_dir,
        artifact_url=config.storage.public_base_url,
        resources=resources,
    )

    # 6. 启动服务器 (uvicorn 自行处理 SIGINT/SIGTERM 并优雅关闭)
    server = uvicorn.Server(
        uvicorn.Config(
            app,
            host=config.server.host,
            port=config.server.http_port,
            log_config=None,
        )
    )
    logger.info(f"Serving on {config.server.host}:{config.server.http_port}")
    await server.serve()
    logger.info("✓ Staging Service stopped")


def run() -> None:
    """命令行入口"""
    try:
        asyncio.run(main())
    except Exception as e:
        logging.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    run()
