"""Celery tasks for uploaded media."""
from baanboard.core.celery_app import celery_app
from baanboard.services.storage_service import get_storage


@celery_app.task
def delete_media(url: str) -> bool:
    deleted = get_storage().delete(url)
    print(f"[Media] delete {url}: {'ok' if deleted else 'not found'}")
    return deleted


def schedule_media_deletion(url: str | None) -> None:
    """Queue removal of a replaced or orphaned upload."""
    if url:
        delete_media.delay(url)
