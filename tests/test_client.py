import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from bucketfs.client import ObjectStoreClient, UploadProperties
from bucketfs.client.errors import _convert_client_error, translate_errors
from bucketfs.client.exceptions import (
    AccessDeniedError,
    BucketError,
    BucketFSError,
    ObjectError,
    ObjectNotFoundError,
)
from bucketfs.client.types import guess_content_type, upload_extra_args
from conftest import put

def _client_error(code, operation="HeadObject"):
    return ClientError({"Error": {"Code": code, "Message": "boom"}}, operation)

@pytest.mark.parametrize("code, expected", [
    ("404", ObjectNotFoundError),
    ("NoSuchKey", ObjectNotFoundError),
    ("NotFound", ObjectNotFoundError),
    ("403", AccessDeniedError),
    ("AccessDenied", AccessDeniedError),
    ("NoSuchBucket", BucketError),
    ("InternalError", ObjectError),
])
def test_convert_client_error(code, expected):
    err = _convert_client_error(_client_error(code), "HEAD")
    assert isinstance(err, expected)

def test_convert_keeps_operation():
    err = _convert_client_error(_client_error("NoSuchKey"), "GET")
    assert err.operation == "GET"
    assert err.code == "ERR_OBJECT_GET"

def test_translate_errors_chains_cause():
    @translate_errors("HEAD")
    def failing():
        raise _client_error("404")

    with pytest.raises(ObjectNotFoundError) as exc_info:
        failing()
    assert isinstance(exc_info.value.__cause__, ClientError)

def test_translate_errors_transport():
    @translate_errors("GET")
    def failing():
        raise EndpointConnectionError(endpoint_url="http://localhost:1")

    with pytest.raises(BucketFSError) as exc_info:
        failing()
    assert exc_info.value.code == "ERR_TRANSPORT"

def test_head_object(s3, bucket, client):
    put(s3, "file.txt", b"hello")
    out = client.head_object(bucket, "file.txt")
    assert out.content_length == 5
    assert out.last_modified is not None

def test_head_missing_object(bucket, client):
    with pytest.raises(ObjectNotFoundError):
        client.head_object(bucket, "missing")

def test_missing_bucket(client):
    with pytest.raises(BucketError):
        client.list_objects("no-such-bucket")

def test_get_object_range(s3, bucket, client):
    put(s3, "file", b"0123456789")
    body = client.get_object(bucket, "file", (2, 5))
    try:
        assert body.read() == b"2345"
    finally:
        body.close()

def test_put_object_with_properties(s3, bucket, client):
    props = UploadProperties(cache_control="max-age=60", content_type="text/csv")
    client.put_object(bucket, "data.bin", b"x", props)
    head = s3.head_object(Bucket=bucket, Key="data.bin")
    assert head["ContentType"] == "text/csv"
    assert head["CacheControl"] == "max-age=60"

def test_list_objects_pagination(s3, bucket, client):
    for i in range(5):
        put(s3, f"dir/file{i}")
    put(s3, "dir/sub/nested")

    first = client.list_objects(bucket, prefix="dir/", delimiter="/", max_keys=3)
    assert first.is_truncated
    assert first.next_token

    second = client.list_objects(bucket, prefix="dir/", delimiter="/",
                                 continuation_token=first.next_token, max_keys=3)
    assert not second.is_truncated

    keys = [o.key for o in first.contents + second.contents]
    prefixes = first.common_prefixes + second.common_prefixes
    assert sorted(keys) == [f"dir/file{i}" for i in range(5)]
    assert prefixes == ["dir/sub/"]

def test_copy_and_delete(s3, bucket, client):
    put(s3, "src", b"payload")
    client.copy_object(bucket, "src", "dst")
    client.delete_object(bucket, "src")
    assert client.head_object(bucket, "dst").content_length == 7
    with pytest.raises(ObjectNotFoundError):
        client.head_object(bucket, "src")

def test_wait_until_exists(s3, bucket, client):
    put(s3, "visible")
    client.wait_until_exists(bucket, "visible", timeout=1)

def test_wait_until_exists_times_out(bucket, client):
    with pytest.raises(ObjectNotFoundError):
        client.wait_until_exists(bucket, "never", timeout=0.2)

def test_guess_content_type():
    assert guess_content_type("dir/image.png") == "image/png"
    assert guess_content_type("notes.txt") == "text/plain"
    assert guess_content_type("blob.unknownext") == "application/octet-stream"
    assert guess_content_type("dir/") == "application/octet-stream"

def test_upload_extra_args():
    assert upload_extra_args("a.txt", None) == {"ContentType": "text/plain"}
    props = UploadProperties(acl="public-read", content_type="application/json")
    assert upload_extra_args("a.txt", props) == {
        "ACL": "public-read",
        "ContentType": "application/json",
    }

def test_session_built_client():
    client = ObjectStoreClient()
    assert client.s3.meta.region_name == "us-east-1"
    client.close()
