import sys
from typing import Optional
from redis import Redis
from rq import Worker
from sqlalchemy.exc import SQLAlchemyError

from invitegate.app import create_app
from invitegate.config import Settings
from invitegate.exceptions import ConfigError
from invitegate.services.invite_service import InviteService
from invitegate.services.queue_service import MAINTENANCE_QUEUE, QueueService
from invitegate.utils.logger import get_logger
from invitegate.utils.redis_lock import RedisLock

logger = get_logger('worker')

CLEANUP_LOCK = 'invite-token-cleanup'
CLEANUP_SEED_LOCK = 'invite-token-cleanup-seed'

_app = None


def get_app():
    """Flask app used for database context, built on first use"""
    global _app
    if _app is None:
        _app = create_app()
    return _app


def run_cleanup(app, redis_client: Redis) -> int:
    """
    Delete expired, inactive invite tokens unless another worker is already
    doing it. Returns the number of tokens removed.
    """
    lock = RedisLock(redis_client, CLEANUP_LOCK)
    if not lock.acquire():
        logger.info("Token cleanup already running elsewhere, skipping")
        return 0

    try:
        with app.app_context():
            return InviteService.cleanup_expired_tokens()
    except SQLAlchemyError:
        logger.exception("Database error during token cleanup")
        raise
    finally:
        lock.release()


def cleanup_expired_tokens() -> int:
    """
    RQ job entry point.
    Runs one cleanup pass, then schedules the next one.
    """
    app = get_app()
    settings = app.config['SETTINGS']
    redis_client = Redis.from_url(settings.redis_url)

    try:
        return run_cleanup(app, redis_client)
    finally:
        QueueService(redis_client).schedule_cleanup(settings.cleanup_interval)


def seed_cleanup(redis_client: Redis, queue_service: Optional[QueueService] = None):
    """
    Start the cleanup chain once, however many workers come up.
    The seed lock keeps two workers starting together from both seeding.
    """
    queue_service = queue_service or QueueService(redis_client)
    lock = RedisLock(redis_client, CLEANUP_SEED_LOCK, expire_seconds=30)
    if not lock.acquire(timeout=5):
        logger.info("Another worker is seeding token cleanup")
        return None

    try:
        return queue_service.ensure_cleanup_scheduled()
    finally:
        lock.release()


def main():
    try:
        settings = Settings.from_env()
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    global _app
    _app = create_app(settings)

    logger.info("Starting worker with Redis at %s", settings.redis_url)
    redis_conn = Redis.from_url(settings.redis_url)

    seed_cleanup(redis_conn)

    worker = Worker([MAINTENANCE_QUEUE], connection=redis_conn)
    logger.info("Worker ready to process maintenance jobs")
    worker.work(with_scheduler=True)


if __name__ == '__main__':
    main()
