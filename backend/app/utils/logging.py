"""
Production logging utility for structured JSON logging.

Provides event-specific logging functions with mandatory fields:
- timestamp (ISO8601)
- level
- service
- event

Optional fields (included when applicable):
- category
- entity_id
- file_name
- duration_ms

Usage:
    from app.utils.logging import configure_logging, log_upload_completed

    configure_logging('storage-api', 'INFO')
    log_upload_completed(logger, category='avatars', entity_id='u1', url='https://...', duration_ms=45.2)
"""
import logging
import sys
from typing import Optional, Dict, Any
from pythonjsonlogger import jsonlogger


class StructuredLogger:
    """Structured JSON logger with mandatory fields."""

    _service_name = None
    _configured = False

    @classmethod
    def configure(cls, service_name: str, log_level: str = "INFO"):
        """
        Configure structured JSON logging for the application.

        Args:
            service_name: Service identifier (e.g. storage-api)
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        """
        if cls._configured:
            return  # Already configured

        cls._service_name = service_name

        # Remove default handlers
        root_logger = logging.getLogger()
        root_logger.handlers = []

        # Create JSON formatter
        formatter = jsonlogger.JsonFormatter(
            '%(timestamp)s %(levelname)s %(name)s %(message)s',
            timestamp=True,
            json_ensure_ascii=False
        )

        # Create console handler (for docker logs)
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)

        # Configure root logger
        root_logger.addHandler(handler)
        root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

        # Add service name to all log records via filter
        class ServiceFilter(logging.Filter):
            def filter(self, record):
                record.service = cls._service_name
                return True

        handler.addFilter(ServiceFilter())

        # botocore logs every signed request at DEBUG
        for noisy in ("botocore", "boto3", "urllib3"):
            logging.getLogger(noisy).setLevel(logging.WARNING)

        cls._configured = True


def _build_log_extra(
    event: str,
    category: Optional[str] = None,
    entity_id: Optional[str] = None,
    file_name: Optional[str] = None,
    duration_ms: Optional[float] = None,
    **kwargs
) -> Dict[str, Any]:
    """
    Build extra fields for structured logging.

    Args:
        event: Event name (mandatory)
        category: Optional asset category (avatars, tutoring-images)
        entity_id: Optional owning entity ID
        file_name: Optional stored file name
        duration_ms: Optional duration in milliseconds
        **kwargs: Additional fields

    Returns:
        Dictionary of extra fields
    """
    extra = {
        "event": event,
        **kwargs
    }

    if category:
        extra["category"] = category
    if entity_id:
        extra["entity_id"] = entity_id
    if file_name:
        extra["file_name"] = file_name
    if duration_ms is not None:
        extra["duration_ms"] = round(duration_ms, 2)

    return extra


# Upload event functions

def log_upload_received(
    logger: logging.Logger,
    category: str,
    entity_id: Optional[str],
    original_name: Optional[str] = None,
    mime_type: Optional[str] = None,
    size_bytes: Optional[int] = None,
    staging_path: Optional[str] = None,
):
    """
    Log the details of an incoming upload request.

    Emitted at DEBUG level: it carries request internals that are only
    useful when tracing a single upload.
    """
    extra = _build_log_extra(
        event="upload_received",
        category=category,
        entity_id=entity_id,
        original_name=original_name,
        mime_type=mime_type,
        size_bytes=size_bytes,
        staging_path=staging_path,
    )
    logger.debug(f"Upload received for {category}: entity={entity_id}", extra=extra)


def log_upload_completed(
    logger: logging.Logger,
    category: str,
    entity_id: str,
    url: str,
    file_name: Optional[str] = None,
    duration_ms: Optional[float] = None,
    **kwargs
):
    """
    Log a successful upload.

    Args:
        logger: Logger instance
        category: Asset category (required)
        entity_id: Owning entity ID (required)
        url: URL of the stored asset (required)
        file_name: Optional stored file name
        duration_ms: Optional duration in milliseconds
        **kwargs: Additional fields
    """
    extra = _build_log_extra(
        event="upload_completed",
        category=category,
        entity_id=entity_id,
        file_name=file_name,
        duration_ms=duration_ms,
        url=url,
        **kwargs
    )
    logger.info(f"Upload completed for {category}: {url}", extra=extra)


def log_upload_failed(
    logger: logging.Logger,
    category: str,
    entity_id: Optional[str],
    error: str,
    duration_ms: Optional[float] = None,
    include_traceback: bool = True,
    **kwargs
):
    """
    Log an upload failure.

    Args:
        logger: Logger instance
        category: Asset category (required)
        entity_id: Owning entity ID, may be missing when that is the failure
        error: Error message (required)
        duration_ms: Optional duration in milliseconds
        include_traceback: Whether to include stack trace (default: True for errors)
        **kwargs: Additional fields
    """
    extra = _build_log_extra(
        event="upload_failed",
        category=category,
        entity_id=entity_id,
        duration_ms=duration_ms,
        error=str(error),
        **kwargs
    )

    message = f"Upload failed for {category}: {error}"

    if include_traceback:
        exc_info = sys.exc_info()
        if exc_info[0] is not None:
            logger.error(message, extra=extra, exc_info=exc_info)
        else:
            logger.error(message, extra=extra)
    else:
        logger.error(message, extra=extra)


def log_staging_cleanup_failed(
    logger: logging.Logger,
    category: str,
    staging_path: str,
    error: str,
):
    """Log a staging file that could not be removed. Never raised further."""
    extra = _build_log_extra(
        event="staging_cleanup_failed",
        category=category,
        staging_path=staging_path,
        error=str(error),
    )
    logger.error(f"Failed to remove staging file {staging_path}: {error}", extra=extra)


def log_asset_deleted(
    logger: logging.Logger,
    category: str,
    entity_id: str,
    file_name: str,
    success: bool,
):
    """Log the outcome of an asset deletion."""
    extra = _build_log_extra(
        event="asset_deleted",
        category=category,
        entity_id=entity_id,
        file_name=file_name,
        success=success,
    )
    logger.info(f"Asset delete for {category}/{entity_id}/{file_name}: success={success}", extra=extra)


def configure_logging(service_name: str, log_level: str = "INFO"):
    """Configure logging (alias for StructuredLogger.configure)."""
    StructuredLogger.configure(service_name, log_level)
