"""Configuration for web article summarizer.

Values come from keyword arguments, then ``SUMMARIZER_*`` environment
variables, then a ``.env`` file in the working directory. The API key is
read from ``GEMINI_API_KEY`` (or ``GOOGLE_API_KEY``) and the API version from
``GEMINI_API_VERSION``.
"""

from typing import Annotated

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/122.0.0.0 Safari/537.36"
)

DEFAULT_EXTRACTION_RULES = (
    ".view_con",
    "#articleText",
    ".article-body",
    "#article-view-content-div",
    "#article-body",
    "article",
    "@trafilatura",
)

DEFAULT_PROMPT_TEMPLATE = """You are a healthcare expert. Summarize the following article in three lines, written in {language}.
Title: {title}
Content: {content}"""

# Named extraction strategies; any other rule is treated as a CSS selector.
NAMED_RULES = ("@trafilatura", "@newspaper")


class Config(BaseSettings):
    """Runtime configuration for a summarization run."""

    model_config = SettingsConfigDict(
        env_prefix="SUMMARIZER_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY"),
    )
    api_version: str = Field(
        default="v1beta",
        validation_alias=AliasChoices("GEMINI_API_VERSION"),
    )
    timeout_ms: int = Field(default=15000, ge=1)
    min_content_length: int = Field(default=50, ge=0)
    max_content_length: int = Field(default=2000, ge=1)
    max_rate_limit_retries: int = Field(default=3, ge=1)
    backoff_ms: int = Field(default=30000, ge=0)
    inter_item_delay_ms: int = Field(default=4000, ge=0)
    fallback_model_name: str = Field(default="gemini-2.0-flash", min_length=1)
    preferred_model_tags: Annotated[tuple[str, ...], NoDecode] = ("flash", "pro")
    extraction_rules: Annotated[tuple[str, ...], NoDecode] = DEFAULT_EXTRACTION_RULES
    prompt_template: str = DEFAULT_PROMPT_TEMPLATE
    summary_language: str = "English"
    request_headers: dict[str, str] = Field(
        default_factory=lambda: {"User-Agent": DEFAULT_USER_AGENT}
    )
    title_column: str = "title"
    link_column: str = "link"
    keyword_column: str | None = None
    date_column: str | None = None

    @field_validator("preferred_model_tags", "extraction_rules", mode="before")
    @classmethod
    def parse_comma_separated(cls, v):
        if isinstance(v, str):
            return tuple(p.strip() for p in v.split(",") if p.strip())
        return v

    @field_validator("extraction_rules")
    @classmethod
    def check_extraction_rules(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if not v:
            raise ValueError("At least one extraction rule is required")
        unknown = [r for r in v if r.startswith("@") and r not in NAMED_RULES]
        if unknown:
            raise ValueError(f"Unknown named extraction rules: {unknown}")
        return v

    @field_validator("prompt_template")
    @classmethod
    def check_prompt_template(cls, v: str) -> str:
        if "{content}" not in v:
            raise ValueError("prompt_template must contain a {content} placeholder")
        # Literal braces must be doubled; anything else fails at render time
        try:
            v.format(title="", content="", language="")
        except (KeyError, IndexError, ValueError) as e:
            raise ValueError(
                f"prompt_template only supports {{title}}, {{content}} and {{language}} "
                f"placeholders; double literal braces ({e!r})"
            ) from e
        return v

    @model_validator(mode="after")
    def check_length_bounds(self) -> "Config":
        if self.min_content_length > self.max_content_length:
            raise ValueError("min_content_length cannot exceed max_content_length")
        return self

    @classmethod
    def from_env(cls, **overrides) -> "Config":
        """
        Build a configuration from the environment and ``.env``.

        Args:
            **overrides: Explicit values that win over the environment; None values are ignored

        Returns:
            Config instance
        """
        return cls(**{k: v for k, v in overrides.items() if v is not None})
