"""
Configuration loader for the SSW freight bridge
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://ssw.inf.br/ws/sswCotacaoColeta/index.php"
DEFAULT_NAMESPACE = "urn:sswinfbr.sswCotacaoColeta"


class CredentialsConfig(BaseModel):
    """Fallback account used when a payload carries no credentials"""

    domain: str = ""
    login: str = ""
    password: str = Field(default="", repr=False)
    payer_password: str = Field(default="", repr=False)


class ClassifierConfig(BaseModel):
    """How remote outcome codes are read"""

    success_code: int = 0
    # No invalid-login code is documented by SSW; list them here once observed.
    auth_error_codes: List[int] = Field(default_factory=list)
    auth_error_keywords: List[str] = Field(default_factory=lambda: ["login"])


class SswConfig(BaseModel):
    """Complete SSW bridge configuration"""

    endpoint: str = DEFAULT_ENDPOINT
    namespace: str = DEFAULT_NAMESPACE
    timeout_seconds: float = Field(default=30.0, gt=0.0, le=120.0)
    collect_by_default: bool = False
    default_collection_time: str = "17:00"
    note_max_length: int = Field(default=195, ge=1)
    raw_body_preview_chars: int = Field(default=2000, ge=0)
    echo_request: bool = False
    credentials: CredentialsConfig = Field(default_factory=CredentialsConfig)
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)


_ENV_OVERRIDES = {
    "SSW_ENDPOINT": ("endpoint",),
    "SSW_NAMESPACE": ("namespace",),
    "SSW_TIMEOUT_SECONDS": ("timeout_seconds",),
    "SSW_COLLECT_BY_DEFAULT": ("collect_by_default",),
    "SSW_ECHO_REQUEST": ("echo_request",),
    "SSW_DOMAIN": ("credentials", "domain"),
    "SSW_LOGIN": ("credentials", "login"),
    "SSW_PASSWORD": ("credentials", "password"),
    "SSW_PAYER_PASSWORD": ("credentials", "payer_password"),
}


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    for env_name, path in _ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value is None or value == "":
            continue
        target = data
        for key in path[:-1]:
            target = target.setdefault(key, {})
        target[path[-1]] = value
    return data


def load_ssw_config(config_path: Optional[Path] = None) -> SswConfig:
    """
    Load and validate the SSW configuration

    Args:
        config_path: Path to a YAML file. Defaults to config/ssw_config.yml;
            a missing default file is not an error.

    Returns:
        Validated SswConfig object, with SSW_* environment variables applied

    Raises:
        FileNotFoundError: If an explicit config_path doesn't exist
        ValidationError: If config doesn't match schema
    """
    explicit = config_path is not None
    if config_path is None:
        config_path = Path(__file__).parent.parent.parent / "config" / "ssw_config.yml"

    data: Dict[str, Any] = {}
    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    elif explicit:
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        config = SswConfig(**_apply_env_overrides(data))
        logger.info("Loaded SSW config (endpoint=%s, timeout=%ss)", config.endpoint, config.timeout_seconds)
        return config
    except ValidationError as e:
        logger.error(f"SSW config validation failed: {e}")
        raise
