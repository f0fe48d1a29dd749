"""
Configuration for the PharmaGuard service.
Centralizes tunable parameters for request intake, the narrative
generator and logging. Clinical rule tables are not configurable.
"""

import json
import os
from typing import List

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field

# Load .env file (walks up directories to find it)
load_dotenv(find_dotenv())


class UploadConfig(BaseModel):
    """Limits applied to uploaded VCF files before parsing."""

    max_upload_bytes: int = Field(
        default=5 * 1024 * 1024,
        gt=0,
        description="Maximum accepted VCF size in bytes (5 MB)"
    )

    allowed_suffixes: List[str] = Field(
        default_factory=lambda: [".vcf"],
        description="Accepted file name suffixes"
    )


class LLMConfig(BaseModel):
    """Narrative explanation generator settings (Groq, OpenAI-compatible API)."""

    enabled: bool = Field(
        default=True,
        description="Call the LLM; when False the fallback summary is always used"
    )

    api_url: str = Field(
        default="https://api.groq.com/openai/v1/chat/completions",
        description="Chat completions endpoint"
    )

    model: str = Field(
        default_factory=lambda: os.environ.get("GROQ_MODEL", "llama-3.1-8b-instant"),
        description="Model name"
    )

    timeout_seconds: float = Field(
        default=30.0,
        gt=0.0,
        description="HTTP timeout per request"
    )

    max_tokens: int = Field(
        default=200,
        gt=0,
        description="Completion token limit (3-4 sentences)"
    )

    temperature: float = Field(
        default=0.1,
        ge=0.0,
        le=2.0,
        description="Low temperature for consistent, factual prose"
    )


class LoggingConfig(BaseModel):
    """Root logger settings applied by app.core.logging."""

    level: str = Field(
        default_factory=lambda: os.environ.get("PHARMAGUARD_LOG_LEVEL", "INFO"),
        description="Root log level"
    )

    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log record format"
    )


class PharmacogenomicsConfig(BaseModel):
    """Main configuration for the service."""

    upload: UploadConfig = Field(
        default_factory=UploadConfig,
        description="Upload validation limits"
    )

    llm: LLMConfig = Field(
        default_factory=LLMConfig,
        description="Narrative generator configuration"
    )

    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration"
    )

    dev_endpoints_enabled: bool = Field(
        default_factory=lambda: os.environ.get("PHARMAGUARD_DEV_ENDPOINTS", "").lower()
        in ("1", "true", "yes"),
        description="Expose the raw VCF parse endpoint"
    )


# Global configuration instance
_config: PharmacogenomicsConfig = PharmacogenomicsConfig()


def get_config() -> PharmacogenomicsConfig:
    """Get the global configuration instance."""
    return _config


def update_config(**kwargs):
    """Update configuration parameters. Nested keys use dots: ``llm.model``."""
    global _config
    current_dict = _config.model_dump()

    for key, value in kwargs.items():
        if '.' in key:
            parts = key.split('.')
            current = current_dict
            for part in parts[:-1]:
                current = current[part]
            current[parts[-1]] = value
        else:
            current_dict[key] = value

    _config = PharmacogenomicsConfig(**current_dict)
    return _config


def reset_config():
    """Restore defaults (environment is re-read)."""
    global _config
    _config = PharmacogenomicsConfig()
    return _config


def load_config_from_file(filepath: str):
    """Load configuration from a JSON file."""
    global _config

    with open(filepath, 'r') as f:
        config_dict = json.load(f)

    _config = PharmacogenomicsConfig(**config_dict)
    return _config


def save_config_to_file(filepath: str):
    """Save current configuration to a JSON file."""
    with open(filepath, 'w') as f:
        json.dump(_config.model_dump(), f, indent=2)


# Convenience accessors
def get_upload_config() -> UploadConfig:
    return _config.upload


def get_llm_config() -> LLMConfig:
    return _config.llm
