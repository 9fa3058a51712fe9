"""Abstract contract for the photo view analytics sink."""

from abc import ABC, abstractmethod


class PhotoViewRecorder(ABC):
    """Receives fire-and-forget notifications of non-owner photo views."""

    @abstractmethod
    def record_view(
        self,
        *,
        photo_id: str,
        owner_id: str,
        viewer_id: str,
        viewed_at: str,
    ) -> None:
        """Record that `viewer_id` viewed `owner_id`'s photo at `viewed_at`."""
