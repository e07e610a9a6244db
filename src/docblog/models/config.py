"""Pydantic configuration models for docblog."""

import os
import re
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field

DEFAULT_EXPORT_URL = "https://docs.google.com/document/d/{doc_id}/export?format=html"
DEFAULT_COVER_IMAGE = "/default-thumbnail.jpg"

DEFAULT_REFINE_PROMPT = (
    "You are a professional content editor polishing a Markdown blog post. "
    "Check whether the Markdown formatting is tidy and complete and fix anything "
    "that looks broken. If a table does not render cleanly, you may present its "
    "information in another clear and readable layout. Apart from formatting, do "
    "not add any words that are not already in the article. Reply with the "
    "adjusted Markdown only."
)


def _expand_env_var(value: Optional[str]) -> Optional[str]:
    """Expand environment variable references in a string.

    Supports $VAR and ${VAR} syntax. Unset variables expand to an empty
    string so an unconfigured secret reads as missing.
    """
    if value is None:
        return None

    pattern = r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)"

    def replace(match: re.Match) -> str:
        var_name = match.group(1) or match.group(2)
        return os.environ.get(var_name, "")

    return re.sub(pattern, replace, value) or None


class SourceConfig(BaseModel):
    """Configuration for fetching raw document exports."""

    export_url: str = Field(
        DEFAULT_EXPORT_URL,
        description="Export URL template; {doc_id} is substituted",
    )
    min_length: int = Field(
        100,
        ge=0,
        description="Exports shorter than this many characters are rejected as empty",
    )
    debug_html_dir: Optional[Path] = Field(
        None,
        description="If set, raw export HTML is saved here as <doc_id>.html",
    )

    model_config = {"extra": "forbid"}


class AssetHostConfig(BaseModel):
    """Configuration for the Cloudinary image host.

    Secrets support $VAR / ${VAR} expansion, e.g. api_secret: '$CLOUDINARY_API_SECRET'.
    """

    cloud_name: Optional[str] = Field(None, description="Cloudinary cloud name")
    api_key: Optional[str] = Field(None, description="Cloudinary API key")
    api_secret: Optional[str] = Field(None, description="Cloudinary API secret")
    folder: Optional[str] = Field(None, description="Target folder for uploaded images")
    default_image: str = Field(
        DEFAULT_COVER_IMAGE,
        description="Cover image used when no image could be relocated",
    )

    model_config = {"extra": "forbid"}

    def model_post_init(self, __context: object) -> None:
        """Expand environment variables in credential fields after init."""
        for name in ("cloud_name", "api_key", "api_secret"):
            value = getattr(self, name)
            if value:
                object.__setattr__(self, name, _expand_env_var(value))

    @property
    def is_configured(self) -> bool:
        """True when all credentials needed for a signed upload are present."""
        return bool(self.cloud_name and self.api_key and self.api_secret)


class RefineConfig(BaseModel):
    """Configuration for the optional Markdown refinement pass."""

    enabled: bool = Field(True, description="Run the refinement pass when an API key is available")
    api_key: Optional[str] = Field(None, description="OpenAI API key")
    model: str = Field("gpt-3.5-turbo", description="Chat model used for refinement")
    temperature: float = Field(0.3, ge=0, le=2, description="Sampling temperature")
    base_url: Optional[str] = Field(None, description="Alternative OpenAI-compatible API base URL")
    system_prompt: str = Field(DEFAULT_REFINE_PROMPT, description="Editing instruction sent with the text")

    model_config = {"extra": "forbid"}

    def model_post_init(self, __context: object) -> None:
        """Expand environment variables in the API key after init."""
        if self.api_key:
            object.__setattr__(self, "api_key", _expand_env_var(self.api_key))

    @property
    def is_active(self) -> bool:
        """True when refinement is enabled and an API key is present."""
        return self.enabled and bool(self.api_key)


class OutputConfig(BaseModel):
    """Configuration for Markdown output."""

    directory: Path = Field(Path("./posts"), description="Directory for generated Markdown files")

    model_config = {"extra": "forbid"}


class StateConfig(BaseModel):
    """Locations of the persisted pending/completed id lists."""

    pending_file: Path = Field(
        Path("unConvertDocIds.json"),
        description="JSON array of document ids still to convert",
    )
    completed_file: Path = Field(
        Path("convertedDocIds.json"),
        description="JSON array of document ids already converted",
    )

    model_config = {"extra": "forbid"}


class NetworkConfig(BaseModel):
    """Configuration for HTTP client and network behavior."""

    proxy: Optional[str] = Field(None, description="HTTP/HTTPS proxy URL")
    user_agent: Optional[str] = Field(None, description="Custom User-Agent header")
    max_retries: int = Field(
        0,
        ge=0,
        description="Transport-level retries for 429/5xx and connection errors",
    )
    timeout: float = Field(60.0, gt=0, description="Per-request timeout in seconds")

    model_config = {"extra": "forbid"}


class DocblogConfig(BaseModel):
    """
    Root configuration model for docblog.

    Built once at process start and handed to the BatchOrchestrator.

    Example:
        config = DocblogConfig(
            output=OutputConfig(directory=Path("./blog/posts")),
            refine=RefineConfig(enabled=False),
        )

    YAML format:
        output:
          directory: ./blog/posts
        assets:
          cloud_name: my-cloud
          api_key: $CLOUDINARY_API_KEY
          api_secret: ${CLOUDINARY_API_SECRET}
        refine:
          enabled: false
    """

    source: SourceConfig = Field(default_factory=SourceConfig)
    assets: AssetHostConfig = Field(default_factory=AssetHostConfig)
    refine: RefineConfig = Field(default_factory=RefineConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    state: StateConfig = Field(default_factory=StateConfig)
    network: NetworkConfig = Field(default_factory=NetworkConfig)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "INFO",
        description="Logging level",
    )
    log_file: Optional[Path] = Field(None, description="Log file path")
    dry_run: bool = Field(False, description="List documents without converting them")

    model_config = {"extra": "forbid"}

    def to_yaml(self) -> str:
        """Serialize config to YAML string."""
        import yaml

        return yaml.dump(self.model_dump(mode="json", exclude_none=True), default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "DocblogConfig":
        """Load config from YAML string."""
        import yaml

        data = yaml.safe_load(yaml_str) or {}
        return cls.model_validate(data)

    @classmethod
    def from_yaml_file(cls, path: Path) -> "DocblogConfig":
        """Load config from YAML file."""
        return cls.from_yaml(path.read_text(encoding="utf-8"))
