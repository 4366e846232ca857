"""GridFSBlobStore against a stand-in for the motor GridFS bucket."""

from types import SimpleNamespace

import pytest
from gridfs.errors import NoFile
from pymongo.errors import AutoReconnect

from profile_photos.core.errors import PhotoStorageError
from profile_photos.storage.gridfs_store import GridFSBlobStore


class _Cursor:
    def __init__(self, items):
        self._items = list(items)

    def __aiter__(self):
        return self

    async def __anext__(self):
        if not self._items:
            raise StopAsyncIteration
        return self._items.pop(0)


class _Stream:
    def __init__(self, data):
        self._data = data

    async def read(self):
        return self._data


class FakeBucket:
    def __init__(self):
        self.files = {}
        self.data = {}
        self.next_id = 100
        self.deleted = []

    def find(self, criteria):
        def ok(f):
            return all(getattr(f, k) == v for k, v in criteria.items())
        return _Cursor([f for f in self.files.values() if ok(f)])

    async def open_download_stream(self, file_id):
        if file_id not in self.data:
            raise NoFile(file_id)
        return _Stream(self.data[file_id])

    async def upload_from_stream(self, filename, source, metadata=None):
        self.next_id += 1
        fid = self.next_id
        self.files[fid] = SimpleNamespace(_id=fid, filename=filename, metadata=metadata, length=len(source))
        self.data[fid] = source
        return fid

    async def delete(self, file_id):
        if file_id not in self.files:
            raise NoFile(file_id)
        del self.files[file_id]
        del self.data[file_id]
        self.deleted.append(file_id)


@pytest.fixture
def bucket() -> FakeBucket:
    return FakeBucket()


async def test_store_find_read(bucket: FakeBucket) -> None:
    store = GridFSBlobStore(bucket)
    fid = await store.store("42", {"userId": 42, "when": 1, "contentType": "image/png"}, b"png")

    (blob,) = await store.find("42")
    assert blob.id == fid
    assert blob.metadata["contentType"] == "image/png"
    assert blob.length == 3
    assert await store.read(blob) == b"png"
    assert await store.filenames() == ["42"]


async def test_delete_by_metadata_only_hits_matching_blob(bucket: FakeBucket) -> None:
    store = GridFSBlobStore(bucket)
    meta_a = {"userId": 1, "when": 1, "contentType": "image/png"}
    meta_b = {"userId": 1, "when": 2, "contentType": "image/png"}
    await store.store("1", meta_a, b"a")
    keep = await store.store("1", meta_b, b"b")

    assert await store.delete({"filename": "1", "metadata": meta_a}) == 1
    assert [b.id for b in await store.find("1")] == [keep]


async def test_delete_tolerates_concurrently_removed_file(bucket: FakeBucket) -> None:
    store = GridFSBlobStore(bucket)
    fid = await store.store("2", {"when": 1}, b"x")

    async def gone(file_id):
        raise NoFile(file_id)

    bucket.delete = gone
    assert await store.delete({"_id": fid}) == 0


async def test_driver_errors_become_storage_errors(bucket: FakeBucket) -> None:
    store = GridFSBlobStore(bucket)

    def down(criteria):
        raise AutoReconnect("connection reset")

    bucket.find = down
    with pytest.raises(PhotoStorageError):
        await store.find("1")


async def test_read_missing_file_is_storage_error(bucket: FakeBucket) -> None:
    store = GridFSBlobStore(bucket)
    fid = await store.store("3", {"when": 1}, b"x")
    (blob,) = await store.find("3")
    await bucket.delete(fid)

    with pytest.raises(PhotoStorageError):
        await store.read(blob)
