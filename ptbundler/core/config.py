from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_OUTDIR = "bundled"


def _normalise_extension(ext: str) -> str:
    """Strip whitespace and a leading dot so ``.php`` and ``php`` are equal."""
    return ext.strip().lstrip(".")


class Settings(BaseSettings):
    """Bundler settings loaded from environment variables.

    Every field can be overridden with a ``PTBUNDLER_`` prefixed variable,
    e.g. ``PTBUNDLER_DEFAULT_VERSION=0.1.0``, or from a local ``.env``.
    """

    model_config = SettingsConfigDict(
        env_prefix="PTBUNDLER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Version used when `git describe` yields nothing
    default_version: str = "1.0.0"

    # Token replaced in the plugin entry file
    version_placeholder: str = "%%VERSION%%"

    # Entry file is {ptname}/{ptname}.{entry_extension}
    entry_extension: str = "php"

    @field_validator("entry_extension", mode="before")
    @classmethod
    def normalise_entry_extension(cls, v: str) -> str:
        return _normalise_extension(v)

    # Output directory for archives and marker files
    outdir: str = DEFAULT_OUTDIR

    git_timeout_seconds: int = 30

    # Marker files read by downstream tooling
    marker_with_version: str = "BUNDLE_FNAME_VERSION_APPENDED"
    marker_without_version: str = "BUNDLE_FNAME_NO_VERSION"

    debug: bool = False


def get_settings() -> Settings:
    return Settings()
