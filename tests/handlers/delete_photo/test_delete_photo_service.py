import pytest
from fakes import InMemoryObjectStorage, InMemoryPhotoStore, make_photo

from core.models.errors import LastPhotoUndeletableError, NotFoundError, StorageWriteFailedError
from core.models.photo import VerificationStatus
from handlers.delete_photo.service import DeleteService


class World:
    def __init__(self, runner, *photos):
        self.runner = runner
        self.storage = InMemoryObjectStorage()
        self.store = InMemoryPhotoStore(list(photos))
        for photo in photos:
            for key in photo.storage_keys:
                self.storage.objects[key] = (b"bytes", "image/jpeg")
        self.service = DeleteService(storage=self.storage, store=self.store, runner=runner)

    def delete(self, photo_id, owner_id="owner_1"):
        result = self.service.delete_photo(owner_id=owner_id, photo_id=photo_id)
        self.runner.drain(timeout=5)
        return result


def test_soft_deletes_and_removes_objects(runner):
    world = World(runner, make_photo("pho_1", thumbnail=True), make_photo("pho_2"))

    result = world.delete("pho_1")

    assert result == {"photo_id": "pho_1", "deleted_at": "2024-06-01T00:00:00+00:00"}
    assert world.store.photos["pho_1"].is_deleted
    assert sorted(world.storage.objects) == ["photos/owner_1/processed/pho_2.jpg"]


def test_last_photo_is_kept(runner):
    world = World(runner, make_photo("pho_1"))

    with pytest.raises(LastPhotoUndeletableError):
        world.delete("pho_1")

    assert not world.store.photos["pho_1"].is_deleted
    assert world.storage.called("delete") == 0


def test_other_owner_is_not_found(runner):
    world = World(runner, make_photo("pho_1", owner_id="owner_2"), make_photo("pho_2", owner_id="owner_2"))

    with pytest.raises(NotFoundError):
        world.delete("pho_1")

    assert world.store.called("soft_delete_photo") == 0


def test_already_deleted_is_not_found(runner):
    world = World(runner, make_photo("pho_1", is_deleted=True), make_photo("pho_2"))

    with pytest.raises(NotFoundError):
        world.delete("pho_1")


def test_primary_is_reassigned_to_oldest_approved(runner):
    world = World(
        runner,
        make_photo("pho_primary", is_primary=True, created_at="2024-01-01T00:00:00+00:00"),
        make_photo("pho_newer", created_at="2024-03-01T00:00:00+00:00"),
        make_photo("pho_pending", status=VerificationStatus.PENDING, created_at="2024-01-15T00:00:00+00:00"),
        make_photo("pho_older", created_at="2024-02-01T00:00:00+00:00"),
    )

    world.delete("pho_primary")

    assert world.store.primaries("owner_1") == ["pho_older"]


def test_no_reassignment_for_non_primary(runner):
    world = World(runner, make_photo("pho_1", is_primary=True), make_photo("pho_2"))

    world.delete("pho_2")

    assert world.store.primaries("owner_1") == ["pho_1"]
    assert world.store.called("set_primary") == 0


def test_no_approved_candidate_leaves_no_primary(runner):
    world = World(
        runner,
        make_photo("pho_primary", is_primary=True),
        make_photo("pho_pending", status=VerificationStatus.PENDING),
    )

    world.delete("pho_primary")

    assert world.store.primaries("owner_1") == []


def test_storage_cleanup_failure_is_not_surfaced(runner):
    world = World(runner, make_photo("pho_1"), make_photo("pho_2"))
    world.storage.fail_on["delete"] = StorageWriteFailedError(message="delete failed")

    result = world.delete("pho_1")

    assert result["photo_id"] == "pho_1"
    assert world.store.photos["pho_1"].is_deleted
    assert runner.failed == 1


class PromotesBeforeDeleteStore(InMemoryPhotoStore):
    """Makes the photo primary between the service's fetch and the delete."""

    def soft_delete_photo(self, *, owner_id, photo_id):
        self.set_primary(owner_id=owner_id, photo_id=photo_id)
        return super().soft_delete_photo(owner_id=owner_id, photo_id=photo_id)


def test_primary_gained_before_delete_is_reassigned(runner):
    photos = [make_photo("pho_a", is_primary=True), make_photo("pho_b"), make_photo("pho_c")]
    store = PromotesBeforeDeleteStore(photos)
    service = DeleteService(storage=InMemoryObjectStorage(), store=store, runner=runner)

    service.delete_photo(owner_id="owner_1", photo_id="pho_b")
    runner.drain(timeout=5)

    assert store.photos["pho_b"].is_deleted
    assert store.primaries("owner_1") == ["pho_a"]
