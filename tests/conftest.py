"""Shared test fixtures for bucket-client tests."""

import io
import sys
from pathlib import Path

# Add project root to path so imports work without installing the package
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from typing import Generator
from unittest.mock import MagicMock

import pytest

from bucket_client import BucketClient

ENDPOINT = "http://s3.dapla.ssb.no"
DEFAULT_BUCKET = "fakePxBucket"


@pytest.fixture
def mock_s3() -> MagicMock:
    """
    Stand-in for a boto3 S3 client.

    list_objects_v2 returns a single page with two objects; other calls
    return empty responses.
    """
    s3 = MagicMock()
    s3.list_objects_v2.return_value = {
        "Contents": [{"Key": "file1.px"}, {"Key": "file2.px"}],
        "IsTruncated": False,
    }
    s3.get_object.return_value = {"Body": io.BytesIO(b"Test Content")}
    return s3


@pytest.fixture(params=[False, True], ids=["aws", "gcs"])
def bucket_client(request, mock_s3: MagicMock) -> Generator[BucketClient, None, None]:
    """BucketClient over the mocked S3 client, in both AWS and GCS modes."""
    yield BucketClient(
        ENDPOINT,
        "fakeKey",
        "fakeSecret",
        use_gcs=request.param,
        default_bucket_name=DEFAULT_BUCKET,
        s3_client=mock_s3,
    )
