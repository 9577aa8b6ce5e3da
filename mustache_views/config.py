import codecs
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mustache_views.exceptions import UnsupportedEncodingException

BASE_DIR = Path(__file__).resolve().parent.parent  # mustache-views/

DEFAULT_CONTENT_TYPE = "text/html;charset=UTF-8"
DEFAULT_PREFIX = "/"
DEFAULT_SUFFIX = ".html"
DEFAULT_ENCODING = "UTF-8"


def lookup_encoding(name: str) -> str:
    """Check that ``name`` is a character set Python can decode and encode.

    Returns:
        The name, unchanged

    Raises:
        UnsupportedEncodingException: If the codec registry does not know the name
    """
    try:
        codecs.lookup(name)
    except LookupError as e:
        raise UnsupportedEncodingException(name) from e
    return name


class ViewSettings(BaseSettings):
    """View resolution settings.

    Instances are immutable: a resolver that needs a different value builds a
    new instance with ``model_copy(update=...)`` after validating the change.
    Every field can be supplied through ``MUSTACHE_VIEWS_*`` environment
    variables or the ``.env`` file.
    """

    # Resource path composition
    prefix: str = Field(default=DEFAULT_PREFIX, description="Prepended to view names")
    suffix: str = Field(default=DEFAULT_SUFFIX, description="Appended to view names")

    # Output
    content_type: str = Field(default=DEFAULT_CONTENT_TYPE, min_length=1, description="Rendered view content type")
    encoding: str = Field(default=DEFAULT_ENCODING, description="Charset for template source and rendered output")
    warn_missing: bool = Field(default=False, description="Log a warning for variables missing from the model")

    # Template location used by the web app
    templates_dir: Path = Field(default=BASE_DIR / "templates", description="Root of the template resource tree")

    # Server
    log_level: str = Field(default="INFO", description="Root log level")
    api_host: str = Field(default="127.0.0.1", min_length=1, description="API server host")
    api_port: int = Field(ge=1, le=65535, default=8000, description="API server port")

    model_config = SettingsConfigDict(
        env_prefix="MUSTACHE_VIEWS_",
        env_file=Path(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
        validate_default=True,
    )

    @field_validator("prefix", "suffix", mode="after")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Drop surrounding whitespace from path fragments."""
        return v.strip()

    @field_validator("encoding", mode="after")
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        """Ensure encoding names a known codec."""
        v = v.strip()
        try:
            return lookup_encoding(v)
        except UnsupportedEncodingException as e:
            raise ValueError(e.message) from e

    @field_validator("log_level", mode="after")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log_level is a standard logging level name."""
        v = v.strip().upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"log_level must be a standard logging level, got {v!r}")
        return v


_settings_instance: ViewSettings | None = None


def get_settings() -> ViewSettings:
    """Get singleton ViewSettings instance for dependency injection.

    Avoids re-reading the environment and ``.env`` file on every request.
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = ViewSettings()
    return _settings_instance
