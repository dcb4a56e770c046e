"""Configuration Management - Infrastructure Layer"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field
import yaml


@dataclass
class ServerConfig:
    """服务器配置"""
    host: str = "0.0.0.0"
    http_port: int = 8080


@dataclass
class ProviderConfig:
    """AI 提供商配置"""
    base_url: str = ""
    api_key: str = ""
    enabled: bool = True
    models: List[str] = field(default_factory=list)


@dataclass
class GenerationConfig:
    """上游生成配置"""
    provider: str = "gemini"
    model: str = ""


@dataclass
class StagingConfig:
    """批处理编排配置"""
    variation_count: int = 3
    max_concurrency: int = 4
    budget_seconds: float = 110.0
    cancel_grace_seconds: float = 2.0
    max_attempts: int = 1
    retry_backoff_seconds: float = 1.0
    max_images: int = 5
    max_image_bytes: int = 10 * 1024 * 1024


@dataclass
class StorageConfig:
    """产物存储配置"""
    backend: str = "local"
    local_dir: str = "data/artifacts"
    public_base_url: str = "/artifacts"
    supabase_url: str = ""
    bucket: str = "staging"
    service_key: str = ""


@dataclass
class AuthConfig:
    """身份验证配置"""
    enabled: bool = False
    supabase_url: str = ""
    anon_key: str = ""


@dataclass
class LoggingConfig:
    """日志配置"""
    level: str = "INFO"
    format: str = "json"


@dataclass
class Settings:
    """应用配置"""
    server: ServerConfig = field(default_factory=ServerConfig)
    providers: Dict[str, ProviderConfig] = field(default_factory=dict)
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    staging: StagingConfig = field(default_factory=StagingConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)
    styles: List[Dict[str, Any]] = field(default_factory=list)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """加载配置

        Args:
            config_path: 配置文件路径（可选）

        Returns:
            配置对象
        """
        # 1. 确定配置文件路径
        if config_path is None:
            env_path = os.getenv("STAGING_CONFIG")
            if env_path:
                config_path = Path(env_path)
            else:
                # 默认路径：项目根目录/config/config.yaml
                project_root = Path(__file__).parent.parent.parent.parent
                config_path = project_root / "config" / "config.yaml"

        # 2. 加载 YAML 配置
        config_data = {}
        if config_path.exists():
            with open(config_path, "r", encoding="utf-8") as f:
                config_data = yaml.safe_load(f) or {}

        # 3. 解析服务器配置
        server_data = config_data.get("server", {})
        server = ServerConfig(
            host=server_data.get("host", "0.0.0.0"),
            http_port=int(server_data.get("http_port", 8080)),
        )

        # 4. 解析提供商配置（支持环境变量覆盖）
        providers = {}
        providers_data = config_data.get("providers", {})

        for provider_name, provider_data in providers_data.items():
            provider_data = provider_data or {}
            # 从环境变量读取 API Key
            api_key_env = f"{provider_name.upper()}_API_KEY"
            api_key = os.getenv(api_key_env, provider_data.get("api_key", ""))

            providers[provider_name] = ProviderConfig(
                base_url=provider_data.get("base_url", ""),
                api_key=api_key,
                enabled=provider_data.get("enabled", True),
                models=provider_data.get("models", []),
            )

        # 5. 解析生成与编排配置
        generation_data = config_data.get("generation", {})
        generation = GenerationConfig(
            provider=generation_data.get("provider", "gemini"),
            model=generation_data.get("model", ""),
        )

        staging_data = config_data.get("staging", {})
        defaults = StagingConfig()
        staging = StagingConfig(
            variation_count=int(staging_data.get("variation_count", defaults.variation_count)),
            max_concurrency=int(staging_data.get("max_concurrency", defaults.max_concurrency)),
            budget_seconds=float(staging_data.get("budget_seconds", defaults.budget_seconds)),
            cancel_grace_seconds=float(
                staging_data.get("cancel_grace_seconds", defaults.cancel_grace_seconds)
            ),
            max_attempts=int(staging_data.get("max_attempts", defaults.max_attempts)),
            retry_backoff_seconds=float(
                staging_data.get("retry_backoff_seconds", defaults.retry_backoff_seconds)
            ),
            max_images=int(staging_data.get("max_images", defaults.max_images)),
            max_image_bytes=int(staging_data.get("max_image_bytes", defaults.max_image_bytes)),
        )

        # 6. 解析存储与身份配置（Supabase 密钥优先读环境变量）
        storage_data = config_data.get("storage", {})
        storage = StorageConfig(
            backend=storage_data.get("backend", "local"),
            local_dir=storage_data.get("local_dir", "data/artifacts"),
            public_base_url=storage_data.get("public_base_url", "/artifacts"),
            supabase_url=os.getenv("SUPABASE_URL", storage_data.get("supabase_url", "")),
            bucket=storage_data.get("bucket", "staging"),
            service_key=os.getenv("SUPABASE_SERVICE_KEY", storage_data.get("service_key", "")),
        )

        auth_data = config_data.get("auth", {})
        auth = AuthConfig(
            enabled=auth_data.get("enabled", False),
            supabase_url=os.getenv("SUPABASE_URL", auth_data.get("supabase_url", "")),
            anon_key=os.getenv("SUPABASE_ANON_KEY", auth_data.get("anon_key", "")),
        )

        # 7. 解析日志配置
        logging_data = config_data.get("logging", {})
        logging_config = LoggingConfig(
            level=os.getenv("LOG_LEVEL", logging_data.get("level", "INFO")),
            format=logging_data.get("format", "json"),
        )

        return cls(
            server=server,
            providers=providers,
            generation=generation,
            staging=staging,
            storage=storage,
            auth=auth,
            styles=config_data.get("styles", []) or [],
            logging=logging_config,
        )


def load_settings(config_path: Optional[Path] = None) -> Settings:
    """加载配置的便捷函数

    Args:
        config_path: 配置文件路径（可选）

    Returns:
        配置对象
    """
    return Settings.load(config_path)
