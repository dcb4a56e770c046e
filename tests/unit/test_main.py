import pytest

from staging_service.infrastructure.config.settings import (
    AuthConfig,
    ProviderConfig,
    Settings,
    StorageConfig,
)
from staging_service.infrastructure.generation.gemini_client import GeminiGenerationClient
from staging_service.infrastructure.generation.mock_client import MockGenerationClient
from staging_service.infrastructure.storage.local_store import LocalArtifactStore
from staging_service.main import (
    create_artifact_store,
    create_generation_client,
    create_identity_resolver,
    create_stage_use_case,
    create_style_catalog,
)


def test_mock_client_without_api_key():
    config = Settings(providers={"gemini": ProviderConfig(api_key="")})

    assert isinstance(create_generation_client(config), MockGenerationClient)


def test_gemini_client_with_api_key():
    config = Settings(providers={"gemini": ProviderConfig(api_key="key", models=["gemini-2.5-flash-image"])})

    client = create_generation_client(config)

    assert isinstance(client, GeminiGenerationClient)
    assert client.model == "gemini-2.5-flash-image"


def test_unknown_provider_is_rejected():
    config = Settings(providers={"acme": ProviderConfig(api_key="key")})
    config.generation.provider = "acme"

    with pytest.raises(ValueError):
        create_generation_client(config)


def test_local_store_by_default(tmp_path):
    config = Settings(storage=StorageConfig(local_dir=str(tmp_path)))

    assert isinstance(create_artifact_store(config), LocalArtifactStore)


def test_supabase_store_requires_credentials():
    config = Settings(storage=StorageConfig(backend="supabase"))

    with pytest.raises(ValueError):
        create_artifact_store(config)


def test_identity_resolver_only_when_enabled():
    assert create_identity_resolver(Settings()) is None
    with pytest.raises(ValueError):
        create_identity_resolver(Settings(auth=AuthConfig(enabled=True)))


def test_style_catalog_from_config():
    assert len(create_style_catalog(Settings()).list_styles()) == 8

    catalog = create_style_catalog(Settings(styles=[{"id": "japandi", "prompt": "Japandi style"}]))

    assert [s.id for s in catalog.list_styles()] == ["japandi"]
    assert catalog.get_style("japandi").prompt_template == "Japandi style"


def test_use_case_follows_staging_config(tmp_path):
    config = Settings()
    config.staging.variation_count = 1

    use_case = create_stage_use_case(
        config, MockGenerationClient(), LocalArtifactStore(tmp_path), create_style_catalog(config)
    )

    assert use_case.variation_indices == (0,)
