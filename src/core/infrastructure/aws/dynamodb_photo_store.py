"""DynamoDB-backed implementation of PhotoRecordStore.

Photo items are keyed by ``photo_id``. Each owner also has a ledger item
(``photo_id = "owner#<owner_id>"``) holding the non-deleted photo count,
the current primary photo id and a version number. Every mutation of an
owner's photo set is a single TransactWriteItems call conditioned on the
ledger version, so concurrent requests for the same owner serialize
through the ledger: the loser of a race re-reads and retries.
"""

from collections.abc import Callable
from typing import Any, TypeVar

from aws_lambda_powertools import Logger
from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError

from core.infrastructure.adapters.dynamodb_adapter import DynamoDBAdapter, DynamoDBAdapterProtocol
from core.models.errors import (
    BackendUnavailableError,
    InvalidStateTransitionError,
    InvariantUpdateFailedError,
    LastPhotoUndeletableError,
    NotApprovedError,
    NotFoundError,
    PhotoServiceError,
    QuotaExceededError,
    RecordCreationFailedError,
)
from core.models.photo import DeletedPhoto, Photo, VerificationStatus
from core.repositories.photo_repository import PhotoRecordStore
from core.utils.constants import LEDGER_MAX_RETRIES, OWNER_CREATED_INDEX, OWNER_LEDGER_PREFIX
from core.utils.time import utc_now_iso

Item = dict[str, Any]
T = TypeVar("T")

logger = Logger(UTC=True)


class _LedgerConflict(Exception):
    """The owner ledger changed between read and write."""


class OwnerLedger:
    """Snapshot of an owner's ledger item."""

    def __init__(self, owner_id: str, item: Item | None) -> None:
        item = item or {}
        self.owner_id = owner_id
        self.active_count = int(item.get("active_count", 0))
        self.primary_photo_id: str | None = item.get("primary_photo_id")
        self.version = int(item.get("version", 0))

    @staticmethod
    def key(owner_id: str) -> Item:
        return {"photo_id": f"{OWNER_LEDGER_PREFIX}{owner_id}"}

    def write(self, *, active_count: int, primary_photo_id: str | None) -> Item:
        """Build the conditional ledger update for a transaction."""
        names = {
            "#count": "active_count",
            "#version": "version",
            "#owner": "ledger_owner_id",
            "#updated": "updated_at",
            "#primary": "primary_photo_id",
        }
        values: Item = {
            ":count": active_count,
            ":next": self.version + 1,
            ":owner": self.owner_id,
            ":now": utc_now_iso(),
        }

        expression = "SET #count = :count, #version = :next, #owner = :owner, #updated = :now"
        if primary_photo_id:
            expression += ", #primary = :primary"
            values[":primary"] = primary_photo_id
        else:
            expression += " REMOVE #primary"

        if self.version == 0:
            condition = "attribute_not_exists(#version)"
        else:
            condition = "#version = :expected"
            values[":expected"] = self.version

        return {
            "Update": {
                "Key": self.key(self.owner_id),
                "UpdateExpression": expression,
                "ConditionExpression": condition,
                "ExpressionAttributeNames": names,
                "ExpressionAttributeValues": values,
            }
        }


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


def _flag_update(photo_id: str, *, is_primary: bool, condition: str, names: Item, values: Item) -> Item:
    return {
        "Update": {
            "Key": {"photo_id": photo_id},
            "UpdateExpression": "SET #is_primary = :flag, #updated = :now",
            "ConditionExpression": condition,
            "ExpressionAttributeNames": {"#is_primary": "is_primary", "#updated": "updated_at", **names},
            "ExpressionAttributeValues": {":flag": is_primary, ":now": utc_now_iso(), **values},
        }
    }


def _unset_flag(photo_id: str) -> Item:
    return _flag_update(
        photo_id,
        is_primary=False,
        condition="attribute_exists(#pk)",
        names={"#pk": "photo_id"},
        values={},
    )


def _set_flag(photo_id: str, owner_id: str) -> Item:
    return _flag_update(
        photo_id,
        is_primary=True,
        condition="#owner = :owner AND #deleted = :false AND #status = :approved",
        names={"#owner": "owner_id", "#deleted": "is_deleted", "#status": "verification_status"},
        values={
            ":owner": owner_id,
            ":false": False,
            ":approved": VerificationStatus.APPROVED.value,
        },
    )


class DynamoDBPhotoStore(PhotoRecordStore):
    """DynamoDB-backed photo record store with error handling.

    All boto3 errors are caught and translated into
    domain-specific errors with stable semantics.
    """

    def __init__(
        self,
        adapter: DynamoDBAdapterProtocol | None = None,
        *,
        max_retries: int = LEDGER_MAX_RETRIES,
    ) -> None:
        """Initialize with DynamoDB adapter."""
        self._db: DynamoDBAdapterProtocol = adapter or DynamoDBAdapter()
        self._max_retries = max_retries

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def fetch_photo(self, *, photo_id: str) -> Photo | None:
        if photo_id.startswith(OWNER_LEDGER_PREFIX):
            return None

        logger.debug("Fetching photo", extra={"photo_id": photo_id})

        try:
            response = self._db.get_item(key={"photo_id": photo_id}, consistent=True)
        except (ClientError, BotoCoreError) as exc:
            logger.error("DynamoDB get_item failed", extra={"photo_id": photo_id})
            raise BackendUnavailableError(
                message="Unable to retrieve photo",
                details={"photo_id": photo_id},
            ) from exc

        item = response.get("Item")
        return Photo.from_item(item) if item else None

    def list_photos(self, *, owner_id: str, include_deleted: bool = False) -> list[Photo]:
        logger.debug(
            "Listing owner photos",
            extra={"owner_id": owner_id, "include_deleted": include_deleted},
        )

        query_kwargs: dict[str, Any] = {
            "IndexName": OWNER_CREATED_INDEX,
            "KeyConditionExpression": Key("owner_id").eq(owner_id),
            "ScanIndexForward": True,
        }

        photos: list[Photo] = []

        try:
            while True:
                response = self._db.query(**query_kwargs)
                photos.extend(Photo.from_item(item) for item in response.get("Items", []))

                last_evaluated_key = response.get("LastEvaluatedKey")
                if not last_evaluated_key:
                    break
                query_kwargs["ExclusiveStartKey"] = last_evaluated_key
        except (ClientError, BotoCoreError) as exc:
            logger.error("DynamoDB query failed", extra={"owner_id": owner_id})
            raise BackendUnavailableError(
                message="Unable to list photos",
                details={"owner_id": owner_id},
            ) from exc

        if not include_deleted:
            photos = [photo for photo in photos if not photo.is_deleted]

        return sorted(photos, key=lambda photo: photo.creation_order)

    def count_photos(self, *, owner_id: str) -> int:
        return self._read_ledger(owner_id).active_count

    def primary_photo_id(self, *, owner_id: str) -> str | None:
        return self._read_ledger(owner_id).primary_photo_id

    # ------------------------------------------------------------------
    # Owner-set mutations
    # ------------------------------------------------------------------

    def create_photo(self, *, photo: Photo, max_photos: int) -> None:
        if photo.is_primary and not photo.is_approved:
            raise NotApprovedError(
                message="Only approved photos can be primary",
                details={"photo_id": photo.photo_id},
            )

        def attempt() -> None:
            ledger = self._read_ledger(photo.owner_id)

            if ledger.active_count >= max_photos:
                raise QuotaExceededError(
                    message=f"Maximum photo limit reached ({max_photos} photos)",
                    details={"owner_id": photo.owner_id, "max_photos": max_photos},
                )

            items: list[Item] = [
                ledger.write(
                    active_count=ledger.active_count + 1,
                    primary_photo_id=photo.photo_id if photo.is_primary else ledger.primary_photo_id,
                ),
                {
                    "Put": {
                        "Item": photo.to_item(),
                        "ConditionExpression": "attribute_not_exists(#pk)",
                        "ExpressionAttributeNames": {"#pk": "photo_id"},
                    }
                },
            ]
            if photo.is_primary and ledger.primary_photo_id:
                items.append(_unset_flag(ledger.primary_photo_id))

            self._transact(items)

        self._with_retries(
            attempt,
            owner_id=photo.owner_id,
            failure=lambda: RecordCreationFailedError(
                message="Unable to save photo at this time",
                details={"photo_id": photo.photo_id},
            ),
        )

        logger.info(
            "Photo record created",
            extra={"photo_id": photo.photo_id, "owner_id": photo.owner_id},
        )

    def soft_delete_photo(self, *, owner_id: str, photo_id: str) -> DeletedPhoto:
        def attempt() -> DeletedPhoto:
            photo = self._require_active(owner_id=owner_id, photo_id=photo_id)
            ledger = self._read_ledger(owner_id)

            if ledger.active_count <= 1:
                raise LastPhotoUndeletableError(
                    message="Cannot delete your last photo - you must keep at least one",
                    details={"photo_id": photo_id},
                )

            now = utc_now_iso()
            was_primary = ledger.primary_photo_id == photo_id
            primary = None if was_primary else ledger.primary_photo_id

            self._transact(
                [
                    ledger.write(active_count=ledger.active_count - 1, primary_photo_id=primary),
                    {
                        "Update": {
                            "Key": {"photo_id": photo_id},
                            "UpdateExpression": (
                                "SET #deleted = :true, #is_primary = :false, "
                                "#deleted_at = :now, #updated = :now"
                            ),
                            "ConditionExpression": "#owner = :owner AND #deleted = :false",
                            "ExpressionAttributeNames": {
                                "#deleted": "is_deleted",
                                "#is_primary": "is_primary",
                                "#deleted_at": "deleted_at",
                                "#updated": "updated_at",
                                "#owner": "owner_id",
                            },
                            "ExpressionAttributeValues": {
                                ":true": True,
                                ":false": False,
                                ":now": now,
                                ":owner": owner_id,
                            },
                        }
                    },
                ]
            )

            deleted = photo.model_copy(
                update={"is_deleted": True, "is_primary": False, "deleted_at": now, "updated_at": now}
            )
            return DeletedPhoto(photo=deleted, was_primary=was_primary)

        deleted = self._with_retries(
            attempt,
            owner_id=owner_id,
            failure=lambda: InvariantUpdateFailedError(
                message="Unable to delete photo at this time",
                details={"photo_id": photo_id},
            ),
        )

        logger.info(
            "Photo soft-deleted",
            extra={"photo_id": photo_id, "owner_id": owner_id, "was_primary": deleted.was_primary},
        )
        return deleted

    def set_primary(self, *, owner_id: str, photo_id: str) -> None:
        def attempt() -> None:
            photo = self._require_active(owner_id=owner_id, photo_id=photo_id)
            if not photo.is_approved:
                raise NotApprovedError(
                    message="Photo must be approved to be set as primary",
                    details={"photo_id": photo_id},
                )

            ledger = self._read_ledger(owner_id)
            if ledger.primary_photo_id == photo_id and photo.is_primary:
                return

            items = [
                ledger.write(active_count=ledger.active_count, primary_photo_id=photo_id),
                _set_flag(photo_id, owner_id),
            ]
            if ledger.primary_photo_id and ledger.primary_photo_id != photo_id:
                items.append(_unset_flag(ledger.primary_photo_id))

            self._transact(items)

        self._with_retries(
            attempt,
            owner_id=owner_id,
            failure=lambda: InvariantUpdateFailedError(
                message="Unable to update primary photo at this time",
                details={"photo_id": photo_id},
            ),
        )

        logger.info("Primary photo set", extra={"photo_id": photo_id, "owner_id": owner_id})

    def unset_primary(self, *, owner_id: str) -> str | None:
        def attempt() -> str | None:
            ledger = self._read_ledger(owner_id)
            previous = ledger.primary_photo_id
            if not previous:
                return None

            self._transact(
                [
                    ledger.write(active_count=ledger.active_count, primary_photo_id=None),
                    _unset_flag(previous),
                ]
            )
            return previous

        previous = self._with_retries(
            attempt,
            owner_id=owner_id,
            failure=lambda: InvariantUpdateFailedError(
                message="Unable to update primary photo at this time",
                details={"owner_id": owner_id},
            ),
        )

        if previous:
            logger.info("Primary photo unset", extra={"photo_id": previous, "owner_id": owner_id})
        return previous

    def update_verification(
        self,
        *,
        photo: Photo,
        status: VerificationStatus,
        reason: str | None = None,
    ) -> Photo:
        updated = photo.with_verification(status, reason=reason)

        names = {
            "#status": "verification_status",
            "#reason": "verification_reason",
            "#updated": "updated_at",
            "#deleted": "is_deleted",
        }
        values: Item = {
            ":status": updated.verification_status.value,
            ":expected": photo.verification_status.value,
            ":now": updated.updated_at,
            ":false": False,
        }

        if updated.verification_reason:
            expression = "SET #status = :status, #reason = :reason, #updated = :now"
            values[":reason"] = updated.verification_reason
        else:
            expression = "SET #status = :status, #updated = :now REMOVE #reason"

        try:
            self._db.update_item(
                Key={"photo_id": photo.photo_id},
                UpdateExpression=expression,
                ConditionExpression="#status = :expected AND #deleted = :false",
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=values,
            )
        except ClientError as exc:
            if _error_code(exc) != "ConditionalCheckFailedException":
                logger.error("DynamoDB update_item failed", extra={"photo_id": photo.photo_id})
                raise BackendUnavailableError(
                    message="Unable to update photo verification",
                    details={"photo_id": photo.photo_id},
                ) from exc

            current = self.fetch_photo(photo_id=photo.photo_id)
            if current is None or current.is_deleted:
                raise NotFoundError(
                    message="Photo not found",
                    details={"photo_id": photo.photo_id},
                ) from exc
            raise InvalidStateTransitionError(
                message="Photo verification status changed concurrently",
                details={
                    "photo_id": photo.photo_id,
                    "current": current.verification_status.value,
                },
            ) from exc
        except BotoCoreError as exc:
            raise BackendUnavailableError(
                message="Unable to update photo verification",
                details={"photo_id": photo.photo_id},
            ) from exc

        logger.info(
            "Photo verification updated",
            extra={"photo_id": photo.photo_id, "status": status.value},
        )
        return updated

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_active(self, *, owner_id: str, photo_id: str) -> Photo:
        photo = self.fetch_photo(photo_id=photo_id)
        if photo is None or photo.owner_id != owner_id or photo.is_deleted:
            raise NotFoundError(message="Photo not found", details={"photo_id": photo_id})
        return photo

    def _read_ledger(self, owner_id: str) -> OwnerLedger:
        try:
            response = self._db.get_item(key=OwnerLedger.key(owner_id), consistent=True)
        except (ClientError, BotoCoreError) as exc:
            logger.error("DynamoDB ledger read failed", extra={"owner_id": owner_id})
            raise BackendUnavailableError(
                message="Unable to read photo records",
                details={"owner_id": owner_id},
            ) from exc

        return OwnerLedger(owner_id, response.get("Item"))

    def _transact(self, items: list[Item]) -> None:
        try:
            self._db.transact_write_items(items=items)
        except ClientError as exc:
            if _error_code(exc) == "TransactionCanceledException":
                raise _LedgerConflict() from exc
            raise

    def _with_retries(
        self,
        attempt: Callable[[], T],
        *,
        owner_id: str,
        failure: Callable[[], PhotoServiceError],
    ) -> T:
        """Run `attempt`, re-reading and retrying when the ledger moved underneath it."""
        for retry in range(self._max_retries):
            try:
                return attempt()
            except _LedgerConflict:
                logger.warning(
                    "Owner ledger conflict, retrying",
                    extra={"owner_id": owner_id, "attempt": retry + 1},
                )
            except (ClientError, BotoCoreError) as exc:
                logger.exception("DynamoDB transaction failed", extra={"owner_id": owner_id})
                raise failure() from exc

        logger.error("Owner ledger conflict retries exhausted", extra={"owner_id": owner_id})
        raise failure()
