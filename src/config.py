"""Application configuration using Pydantic Settings.

All configuration is loaded from environment variables.
No secrets are hardcoded.
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# Loaded by every settings section, nested ones included
ENV_FILE = ".env"


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class VectorStoreBackend(str, Enum):
    """Supported vector database backends."""

    ASTRA = "astra"
    QDRANT = "qdrant"


class EmbeddingSettings(BaseSettings):
    """Embedding provider configuration.

    Defaults target the Cohere v2 embed API.
    """

    model_config = SettingsConfigDict(
        env_prefix="EMBEDDING_",
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_url: str = Field(
        default="https://api.cohere.com/v2",
        description="Embedding API base URL",
    )
    model: str = Field(
        default="embed-english-v3.0",
        description="Embedding model name",
    )
    api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Embedding provider API key",
    )
    input_type: str = Field(
        default="search_query",
        description="Intent tag sent with every embedding request",
    )
    batch_size: int = Field(
        default=96,
        description="Maximum texts per embedding request",
    )
    timeout: float = Field(
        default=30.0,
        description="Request timeout in seconds",
    )


class AstraSettings(BaseSettings):
    """DataStax Astra DB Data API configuration."""

    model_config = SettingsConfigDict(
        env_prefix="ASTRA_",
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_endpoint: str = Field(
        default="http://localhost:8181",
        description="Astra database API endpoint",
    )
    application_token: SecretStr = Field(
        default=SecretStr(""),
        description="Astra application token",
    )
    keyspace: str = Field(
        default="default_keyspace",
        description="Keyspace holding the collections",
    )


class QdrantSettings(BaseSettings):
    """Qdrant vector database configuration."""

    model_config = SettingsConfigDict(
        env_prefix="QDRANT_",
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    url: str = Field(
        default="http://localhost:6333",
        description="Qdrant server URL",
    )
    api_key: SecretStr | None = Field(
        default=None,
        description="Qdrant API key (optional for local)",
    )
    inference_model: str = Field(
        default="sentence-transformers/all-minilm-l6-v2",
        description="Model used for server-side text vectorization",
    )


class TMDBSettings(BaseSettings):
    """The Movie Database API configuration."""

    model_config = SettingsConfigDict(
        env_prefix="TMDB_",
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_url: str = Field(
        default="https://api.themoviedb.org/3",
        description="TMDB API base URL",
    )
    api_key: SecretStr = Field(
        default=SecretStr(""),
        description="TMDB API key",
    )
    timeout: float = Field(
        default=15.0,
        description="Request timeout in seconds",
    )


class Settings(BaseSettings):
    """Main application settings.

    Aggregates all configuration sections.
    """

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application settings
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    # API settings
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host",
    )
    api_port: int = Field(
        default=3000,
        description="API server port",
    )
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed to call the API from a browser",
    )

    # Vector search settings
    vector_store_backend: VectorStoreBackend = Field(
        default=VectorStoreBackend.ASTRA,
        description="Vector database backend",
    )
    vector_store_timeout: float = Field(
        default=30.0,
        description="Vector store request timeout in seconds",
    )
    movie_collection: str = Field(
        default="movie",
        description="Collection searched by precomputed vectors",
    )
    library_collection: str = Field(
        default="library",
        description="Collection searched by store-side vectorized text",
    )
    movie_query_limit: int = Field(
        default=20,
        ge=1,
        description="Maximum records returned by the movie search",
    )
    library_query_limit: int = Field(
        default=50,
        ge=1,
        description="Maximum records returned by the library search",
    )

    # Nested settings
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    astra: AstraSettings = Field(default_factory=AstraSettings)
    qdrant: QdrantSettings = Field(default_factory=QdrantSettings)
    tmdb: TMDBSettings = Field(default_factory=TMDBSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()
