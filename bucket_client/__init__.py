"""Client for S3-compatible object storage (AWS S3 and Google Cloud Storage)."""

from .client import BucketClient
from .settings import BucketSettings, load_settings

__all__ = ["BucketClient", "BucketSettings", "load_settings"]
