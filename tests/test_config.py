"""Tests for application configuration."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from src.config import (
    AstraSettings,
    EmbeddingSettings,
    Environment,
    QdrantSettings,
    Settings,
    TMDBSettings,
    VectorStoreBackend,
    get_settings,
)


class TestEmbeddingSettings:
    """Tests for embedding configuration."""

    def test_default_values(self) -> None:
        """Defaults target the Cohere embed API."""
        settings = EmbeddingSettings()
        assert settings.base_url == "https://api.cohere.com/v2"
        assert settings.model == "embed-english-v3.0"
        assert settings.input_type == "search_query"
        assert settings.batch_size == 96
        assert settings.timeout == 30.0

    def test_api_key_is_secret(self) -> None:
        """API key should be masked when printed."""
        with patch.dict(os.environ, {"EMBEDDING_API_KEY": "co-secret"}):
            settings = EmbeddingSettings()
            assert "co-secret" not in str(settings.api_key)
            assert settings.api_key.get_secret_value() == "co-secret"

    def test_env_override(self) -> None:
        """Environment variables override defaults."""
        with patch.dict(os.environ, {"EMBEDDING_BATCH_SIZE": "64"}):
            settings = EmbeddingSettings()
            assert settings.batch_size == 64


class TestAstraSettings:
    """Tests for Astra configuration."""

    def test_default_keyspace(self) -> None:
        settings = AstraSettings()
        assert settings.keyspace == "default_keyspace"

    def test_env_override(self) -> None:
        """Endpoint and token come from the environment."""
        env = {
            "ASTRA_API_ENDPOINT": "https://db-id-region.apps.astra.datastax.com",
            "ASTRA_APPLICATION_TOKEN": "AstraCS:token",
        }
        with patch.dict(os.environ, env):
            settings = AstraSettings()
            assert settings.api_endpoint == env["ASTRA_API_ENDPOINT"]
            assert settings.application_token.get_secret_value() == "AstraCS:token"
            assert "AstraCS" not in str(settings.application_token)


class TestQdrantSettings:
    """Tests for Qdrant configuration."""

    def test_default_values(self) -> None:
        """Default values for Qdrant."""
        settings = QdrantSettings()
        assert settings.url == "http://localhost:6333"
        assert settings.api_key is None

    def test_api_key_is_secret_when_set(self) -> None:
        """API key should be masked when set."""
        with patch.dict(os.environ, {"QDRANT_API_KEY": "secret-key"}):
            settings = QdrantSettings()
            assert settings.api_key is not None
            assert "secret-key" not in str(settings.api_key)
            assert settings.api_key.get_secret_value() == "secret-key"


class TestTMDBSettings:
    """Tests for TMDB configuration."""

    def test_default_base_url(self) -> None:
        settings = TMDBSettings()
        assert settings.base_url == "https://api.themoviedb.org/3"

    def test_env_override(self) -> None:
        with patch.dict(os.environ, {"TMDB_API_KEY": "tmdb-key"}):
            settings = TMDBSettings()
            assert settings.api_key.get_secret_value() == "tmdb-key"


class TestSettings:
    """Tests for main application settings."""

    def test_default_environment(self) -> None:
        """Default environment is development."""
        settings = Settings()
        assert settings.environment == Environment.DEVELOPMENT

    def test_default_search_settings(self) -> None:
        """Collections and limits match the deployed frontend."""
        settings = Settings()
        assert settings.vector_store_backend == VectorStoreBackend.ASTRA
        assert settings.movie_collection == "movie"
        assert settings.library_collection == "library"
        assert settings.movie_query_limit == 20
        assert settings.library_query_limit == 50

    def test_default_cors(self) -> None:
        settings = Settings()
        assert settings.cors_allow_origins == ["*"]

    def test_nested_settings_loaded(self) -> None:
        """Nested settings are initialized."""
        settings = Settings()
        assert isinstance(settings.embedding, EmbeddingSettings)
        assert isinstance(settings.astra, AstraSettings)
        assert isinstance(settings.qdrant, QdrantSettings)
        assert isinstance(settings.tmdb, TMDBSettings)

    def test_backend_from_env(self) -> None:
        """Backend can be set via string."""
        with patch.dict(os.environ, {"VECTOR_STORE_BACKEND": "qdrant"}):
            settings = Settings()
            assert settings.vector_store_backend == VectorStoreBackend.QDRANT

    def test_environment_enum(self) -> None:
        """Environment can be set via string."""
        with patch.dict(os.environ, {"ENVIRONMENT": "production"}):
            settings = Settings()
            assert settings.environment == Environment.PRODUCTION


class TestEnvFile:
    """Every section reads the .env file, not only the top level."""

    def test_sections_load_dotenv(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        for name in (
            "TMDB_API_KEY",
            "EMBEDDING_API_KEY",
            "ASTRA_APPLICATION_TOKEN",
            "QDRANT_API_KEY",
            "MOVIE_COLLECTION",
        ):
            monkeypatch.delenv(name, raising=False)
        (tmp_path / ".env").write_text(
            "TMDB_API_KEY=tmdb-secret\n"
            "EMBEDDING_API_KEY=co-secret\n"
            "ASTRA_APPLICATION_TOKEN=AstraCS:secret\n"
            "QDRANT_API_KEY=qd-secret\n"
            "MOVIE_COLLECTION=films\n"
            "UNRELATED_KEY=ignored\n",
            encoding="utf-8",
        )
        monkeypatch.chdir(tmp_path)

        settings = Settings()

        assert settings.movie_collection == "films"
        assert settings.tmdb.api_key.get_secret_value() == "tmdb-secret"
        assert settings.embedding.api_key.get_secret_value() == "co-secret"
        assert settings.astra.application_token.get_secret_value() == "AstraCS:secret"
        assert settings.qdrant.api_key is not None
        assert settings.qdrant.api_key.get_secret_value() == "qd-secret"


class TestGetSettings:
    """Tests for settings singleton."""

    def test_returns_settings_instance(self) -> None:
        """get_settings returns a Settings instance."""
        get_settings.cache_clear()
        settings = get_settings()
        assert isinstance(settings, Settings)

    def test_caching(self) -> None:
        """Settings are cached."""
        get_settings.cache_clear()
        settings1 = get_settings()
        settings2 = get_settings()
        assert settings1 is settings2
