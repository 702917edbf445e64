import os

import boto3
import pytest
from moto import mock_aws

from bucketfs.client import ObjectStoreClient
from bucketfs.fs import S3Fs

BUCKET = "bucketfs-test"

def pytest_configure(config):
    """Configure test environment."""
    # Fake credentials so nothing can reach a real account
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"
    os.environ.pop("AWS_PROFILE", None)

@pytest.fixture
def s3():
    """Raw boto3 client against an in-memory S3."""
    with mock_aws():
        yield boto3.client("s3", region_name="us-east-1")

@pytest.fixture
def bucket(s3):
    s3.create_bucket(Bucket=BUCKET)
    return BUCKET

@pytest.fixture
def client(s3):
    client = ObjectStoreClient(s3_client=s3)
    yield client
    client.close()

@pytest.fixture
def make_fs(bucket, client):
    """Factory for filesystems sharing the test bucket."""
    def factory(**kwargs):
        return S3Fs(bucket, client=client, **kwargs)
    return factory

@pytest.fixture
def fs(make_fs):
    return make_fs()

def put(s3, key, body=b""):
    s3.put_object(Bucket=BUCKET, Key=key, Body=body)

def get(s3, key):
    return s3.get_object(Bucket=BUCKET, Key=key)["Body"].read()

def keys(s3):
    resp = s3.list_objects_v2(Bucket=BUCKET)
    return sorted(o["Key"] for o in resp.get("Contents", []))
