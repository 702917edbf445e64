import pytest

from bucketfs.fs import DirectoryLister
from bucketfs.fs.fileinfo import EPOCH
from conftest import put

def test_readdir_pages(fs):
    for name in ["/a", "/b", "/c"]:
        fs.mkdir(name)

    with fs.open("/") as root:
        first = root.readdir(2)
        assert [i.name for i in first] == ["a", "b"]
        second = root.readdir(2)
        assert [i.name for i in second] == ["c"]
        with pytest.raises(EOFError):
            root.readdir(2)

def test_readdir_all(fs, s3):
    fs.mkdir("/dir")
    put(s3, "dir/file1", b"12345")
    put(s3, "dir/sub/file2")

    with fs.open("/dir") as d:
        infos = d.readdir(-1)
    by_name = {i.name: i for i in infos}
    assert set(by_name) == {"sub", "file1"}
    assert by_name["sub"].is_dir
    assert by_name["sub"].mod_time == EPOCH
    assert by_name["file1"].size == 5
    assert not by_name["file1"].is_dir

def test_readdir_all_spans_pages(fs, s3):
    for i in range(DirectoryLister.PAGE_SIZE + 5):
        put(s3, f"many/f{i:04d}")
    with fs.open("/many") as d:
        names = d.readdirnames(0)
    assert len(names) == DirectoryLister.PAGE_SIZE + 5
    assert names[0] == "f0000"

def test_marker_is_not_listed(fs):
    fs.mkdir("/empty")
    with fs.open("/empty") as d:
        assert d.readdir(0) == []

def test_trailing_slash(fs, s3):
    put(s3, "dir/file1")
    with fs.open("/dir/") as d:
        assert d.readdirnames(0) == ["file1"]

def test_prefix_does_not_leak_into_sibling(fs, s3):
    put(s3, "dir1/a")
    put(s3, "dir10/b")
    lister = DirectoryLister(fs, "/dir1")
    assert lister.readdirnames(0) == ["a"]
    assert lister.exhausted

def test_exhausted_after_single_page(fs, s3):
    put(s3, "d/x")
    lister = DirectoryLister(fs, "/d")
    assert lister.readdirnames(10) == ["x"]
    with pytest.raises(EOFError):
        lister.readdirnames(10)
