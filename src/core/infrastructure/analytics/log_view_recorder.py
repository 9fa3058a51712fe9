"""View analytics sink that emits structured log records."""

from aws_lambda_powertools import Logger

from core.repositories.view_recorder import PhotoViewRecorder

logger = Logger(UTC=True)


class LoggingViewRecorder(PhotoViewRecorder):
    def record_view(
        self,
        *,
        photo_id: str,
        owner_id: str,
        viewer_id: str,
        viewed_at: str,
    ) -> None:
        logger.info(
            "Photo viewed",
            extra={
                "photo_id": photo_id,
                "owner_id": owner_id,
                "viewer_id": viewer_id,
                "viewed_at": viewed_at,
            },
        )
