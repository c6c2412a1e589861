"""
Bucket client configuration from environment variables.

A local ``.env`` file is loaded on import; variables already present in the
environment take precedence.

Environment Variables:
    BUCKET_ENDPOINT_URL: S3 or GCS endpoint (required)
    BUCKET_ACCESS_KEY: Access key (falls back to AWS_ACCESS_KEY_ID)
    BUCKET_SECRET_KEY: Secret key (falls back to AWS_SECRET_ACCESS_KEY)
    BUCKET_SESSION_TOKEN: Session token (falls back to AWS_SESSION_TOKEN)
    BUCKET_USE_GCS: Sign requests for Google Cloud Storage (default: false)
    BUCKET_DEFAULT_NAME: Bucket used when a call names none
    BUCKET_REGION: Region passed to the SDK (optional)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Optional

from dotenv import load_dotenv

load_dotenv()

_TRUTHY = ("true", "1", "yes", "on")


@dataclass(frozen=True)
class BucketSettings:
    endpoint_url: str
    access_key: str
    secret_key: str
    session_token: Optional[str] = None
    use_gcs: bool = False
    default_bucket_name: Optional[str] = None
    region: Optional[str] = None


def _coerce_value(raw: str, value_type: str, default: Any) -> Any:
    if raw is None or raw == "":
        return default
    if value_type == "bool":
        return raw.lower() in _TRUTHY
    return raw


def get_setting(
    env_var: str,
    default: Any,
    value_type: str = "string",
    fallback_env: str | None = None,
) -> Any:
    """Get a setting from the environment, trying ``fallback_env`` when unset."""
    for name in (env_var, fallback_env):
        if not name:
            continue
        raw = os.getenv(name)
        if raw is not None and raw != "":
            return _coerce_value(raw, value_type, default)
    return default


def get_bool_setting(env_var: str, default: bool) -> bool:
    return bool(get_setting(env_var, default, "bool"))


def _require(env_var: str, fallback_env: str | None = None) -> str:
    value = get_setting(env_var, None, fallback_env=fallback_env)
    if not value:
        hint = f" or {fallback_env}" if fallback_env else ""
        raise ValueError(f"Missing bucket configuration. Set {env_var}{hint}")
    return value


def load_settings() -> BucketSettings:
    """
    Read bucket client settings from the environment.

    Returns:
        BucketSettings populated from BUCKET_* variables

    Raises:
        ValueError: If the endpoint or credentials are not configured
    """
    return BucketSettings(
        endpoint_url=_require("BUCKET_ENDPOINT_URL"),
        access_key=_require("BUCKET_ACCESS_KEY", "AWS_ACCESS_KEY_ID"),
        secret_key=_require("BUCKET_SECRET_KEY", "AWS_SECRET_ACCESS_KEY"),
        session_token=get_setting("BUCKET_SESSION_TOKEN", None, fallback_env="AWS_SESSION_TOKEN"),
        use_gcs=get_bool_setting("BUCKET_USE_GCS", False),
        default_bucket_name=get_setting("BUCKET_DEFAULT_NAME", None),
        region=get_setting("BUCKET_REGION", None),
    )
