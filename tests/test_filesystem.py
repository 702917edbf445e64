import os

import pytest

from bucketfs.client import ObjectStoreClient
from bucketfs.client.exceptions import AccessDeniedError, ObjectError
from bucketfs.config import FsSettings
from bucketfs.fs import NotExistError, NotSupportedError, PathError, PermissionDeniedError, S3Fs
from bucketfs.fs.fileinfo import EPOCH
from conftest import get, keys, put

def _all_users_permissions(s3, key):
    grants = s3.get_object_acl(Bucket="bucketfs-test", Key=key)["Grants"]
    return {
        g["Permission"] for g in grants
        if g["Grantee"].get("URI", "").endswith("/global/AllUsers")
    }

class RecordingAclClient(ObjectStoreClient):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.acls = []

    def put_object_acl(self, bucket, key, acl):
        self.acls.append((key, acl))
        super().put_object_acl(bucket, key, acl)

class FailingClient(ObjectStoreClient):
    """Raises on copy or delete of the listed keys."""
    def __init__(self, *args, fail_copy=(), fail_delete=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.fail_copy = set(fail_copy)
        self.fail_delete = set(fail_delete)

    def copy_object(self, bucket, src_key, dst_key):
        if src_key in self.fail_copy:
            raise ObjectError("copy refused", operation="COPY")
        super().copy_object(bucket, src_key, dst_key)

    def delete_object(self, bucket, key):
        if key in self.fail_delete:
            raise ObjectError("delete refused", operation="DELETE")
        super().delete_object(bucket, key)

class LaggingClient(ObjectStoreClient):
    """Accepts writes that never become visible."""
    def put_object(self, bucket, key, data, props=None):
        pass

def test_name(fs):
    assert fs.name() == "s3"

def test_create_stat_remove(fs):
    fs.create("/file1").close()
    info = fs.stat("/file1")
    assert info.size == 0
    assert info.name == "file1"
    assert info.mode == 0o664

    fs.remove("/file1")
    with pytest.raises(NotExistError) as exc_info:
        fs.stat("/file1")
    assert exc_info.value.op == "stat"
    assert exc_info.value.path == "/file1"

def test_create_is_visible_before_close(fs):
    f = fs.create("/pending")
    assert fs.stat("/pending").size == 0
    f.close()

def test_remove_all_tree(fs):
    fs.mkdir("/dir1")
    fs.mkdir("/dir1/dir2")
    fs.create("/dir1/file1").close()

    fs.remove_all("/dir1")
    with fs.open("/") as root:
        assert root.readdir(0) == []

def test_mkdir_all(fs):
    fs.mkdir_all("/dir3/dir4")
    info = fs.stat("/dir3/dir4")
    assert info.is_dir
    assert info.mode == 0o755
    # the parent is implied by the marker's key
    assert fs.stat("/dir3").is_dir

def test_mkdir_root_is_noop(fs, s3):
    fs.mkdir("/")
    assert keys(s3) == []

def test_stat_root(fs):
    for name in ["/", "", "."]:
        info = fs.stat(name)
        assert info.is_dir

def test_stat_implicit_directory(fs, s3):
    put(s3, "implicit/child")
    info = fs.stat("/implicit")
    assert info.is_dir
    assert info.mod_time == EPOCH

def test_stat_sibling_prefix_is_not_directory(fs, s3):
    put(s3, "dir10/file")
    with pytest.raises(NotExistError):
        fs.stat("/dir1")

def test_stat_trailing_slash_marker(fs, s3):
    fs.mkdir("/marked")
    info = fs.stat("/marked/")
    assert info.is_dir
    assert info.name == "marked"
    assert info.mod_time != EPOCH

def test_stat_sanitizes(fs, s3):
    put(s3, "dir/file", b"abc")
    assert fs.stat("C:\\dir\\.\\file").size == 3
    assert fs.stat("//dir/../dir/file").size == 3

def test_open_missing(fs):
    with pytest.raises(NotExistError):
        fs.open("/missing")

def test_open_file_unsupported_flags(fs):
    with pytest.raises(NotSupportedError):
        fs.open_file("/f", os.O_RDWR)
    with pytest.raises(NotSupportedError):
        fs.open_file("/f", os.O_WRONLY | os.O_APPEND)

def test_remove_missing(fs):
    with pytest.raises(NotExistError):
        fs.remove("/missing")

def test_remove_directory_marker(fs, s3):
    fs.mkdir("/dir")
    fs.remove("/dir")
    assert keys(s3) == []

def test_remove_all_missing_is_noop(fs):
    fs.remove_all("/missing")

def test_remove_all_file(fs, s3):
    put(s3, "lonely")
    fs.remove_all("/lonely")
    assert keys(s3) == []

def test_remove_all_root(fs, s3):
    put(s3, "a/b/c")
    put(s3, "top")
    fs.remove_all("/")
    assert keys(s3) == []

def test_rename_file(fs, s3):
    put(s3, "old", b"content")
    fs.rename("/old", "/new")
    assert keys(s3) == ["new"]
    assert get(s3, "new") == b"content"

def test_rename_same_name(fs, s3):
    put(s3, "same", b"x")
    fs.rename("/same", "/./same")
    assert keys(s3) == ["same"]

def test_rename_missing(fs):
    with pytest.raises(NotExistError) as exc_info:
        fs.rename("/missing", "/other")
    assert exc_info.value.op == "rename"
    assert isinstance(exc_info.value, PathError)

def test_rename_directory(fs, s3):
    fs.mkdir("/src")
    put(s3, "src/a", b"1")
    put(s3, "src/sub/b", b"2")
    fs.rename("/src", "/dst")
    assert keys(s3) == ["dst/", "dst/a", "dst/sub/b"]
    assert get(s3, "dst/sub/b") == b"2"

@pytest.mark.parametrize("mode, acl", [
    (0o666, "public-read-write"),
    (0o646, "public-read-write"),
    (0o644, "public-read"),
    (0o640, "private"),
    (0o602, "private"),
])
def test_chmod_acl(bucket, s3, mode, acl):
    client = RecordingAclClient(s3_client=s3)
    fs = S3Fs(bucket, client=client)
    put(s3, "shared")
    fs.chmod("/shared", mode)
    assert client.acls == [("shared", acl)]

def test_chmod_applies_grants(fs, s3):
    put(s3, "shared")
    fs.chmod("/shared", 0o644)
    assert _all_users_permissions(s3, "shared") == {"READ"}
    fs.chmod("/shared", 0o600)
    assert _all_users_permissions(s3, "shared") == set()

def test_chmod_missing(fs):
    with pytest.raises(NotExistError):
        fs.chmod("/missing", 0o644)

def test_chown_chtimes(fs, s3):
    put(s3, "f")
    with pytest.raises(NotSupportedError):
        fs.chown("/f", 0, 0)
    with pytest.raises(NotSupportedError):
        fs.chtimes("/f", 0, 0)

def test_prefix(make_fs, s3):
    fs = make_fs(prefix="/tenant/")
    assert fs.prefix == "tenant/"
    with fs.create("/file") as f:
        f.write(b"scoped")
    fs.mkdir("/dir")
    assert keys(s3) == ["tenant/dir/", "tenant/file"]
    with fs.open("/") as root:
        assert sorted(root.readdirnames(0)) == ["dir", "file"]

def test_raw_mode_skips_sanitize(make_fs, fs, s3):
    put(s3, "dir\\file", b"raw")
    raw = make_fs(raw_mode=True)
    assert raw.stat("dir\\file").size == 3
    with pytest.raises(NotExistError):
        fs.stat("dir\\file")

def test_from_settings(client, s3, bucket):
    settings = FsSettings(bucket=bucket, prefix="p", content_type="text/plain")
    fs = S3Fs.from_settings(settings, client=client)
    assert fs.prefix == "p/"
    assert fs.file_props.content_type == "text/plain"
    assert fs.file_props.acl is None

class DenyingClient:
    def head_object(self, bucket, key):
        raise AccessDeniedError(operation="HEAD")

def test_stat_permission_denied():
    fs = S3Fs("bucket", client=DenyingClient())
    with pytest.raises(PermissionDeniedError) as exc_info:
        fs.stat("/secret")
    assert exc_info.value.code == "ERR_PERMISSION"
    assert isinstance(exc_info.value.cause, AccessDeniedError)

def test_create_times_out_when_object_never_appears(bucket, s3):
    fs = S3Fs(bucket, client=LaggingClient(s3_client=s3), create_timeout=0.2)
    with pytest.raises(NotExistError) as exc_info:
        fs.create("/lagging")
    assert exc_info.value.op == "create"

def test_rename_copy_failure_keeps_source(bucket, s3):
    put(s3, "old", b"content")
    fs = S3Fs(bucket, client=FailingClient(s3_client=s3, fail_copy=["old"]))
    with pytest.raises(ObjectError, match="copy refused"):
        fs.rename("/old", "/new")
    assert keys(s3) == ["old"]

def test_rename_delete_failure_leaves_both(bucket, s3):
    put(s3, "old", b"content")
    fs = S3Fs(bucket, client=FailingClient(s3_client=s3, fail_delete=["old"]))
    with pytest.raises(ObjectError, match="delete refused"):
        fs.rename("/old", "/new")
    assert keys(s3) == ["new", "old"]
    assert get(s3, "new") == b"content"

def test_remove_all_stops_at_first_failure(bucket, s3):
    for name in ["a", "b", "c"]:
        put(s3, f"tree/{name}")
    fs = S3Fs(bucket, client=FailingClient(s3_client=s3, fail_delete=["tree/b"]))
    with pytest.raises(ObjectError, match="delete refused"):
        fs.remove_all("/tree")
    # entries are walked in key order: a is gone, b failed, c was never reached
    assert keys(s3) == ["tree/b", "tree/c"]
