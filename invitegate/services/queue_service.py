from datetime import timedelta
from typing import Optional
from uuid import uuid4

from redis import Redis
from rq import Queue

from invitegate.utils.logger import get_logger

logger = get_logger(__name__)

MAINTENANCE_QUEUE = 'maintenance'
CLEANUP_JOB = 'worker.cleanup_expired_tokens'
CLEANUP_JOB_PREFIX = 'invite-token-cleanup:'


class QueueService:
    def __init__(self, redis_client: Redis, queue: Optional[Queue] = None):
        """Wrap the maintenance queue living on the given Redis connection"""
        self._redis = redis_client
        self._queue = queue or Queue(MAINTENANCE_QUEUE, connection=self._redis)

    def schedule_cleanup(self, delay: timedelta = timedelta(0)):
        """
        Queue the expired-token cleanup job.
        A zero delay enqueues it right away, otherwise it is handed to the
        RQ scheduler to run after the delay.
        """
        job_id = f"{CLEANUP_JOB_PREFIX}{uuid4().hex}"

        if delay.total_seconds() <= 0:
            job = self._queue.enqueue(CLEANUP_JOB, job_id=job_id)
        else:
            job = self._queue.enqueue_in(delay, CLEANUP_JOB, job_id=job_id)

        logger.info("Scheduled token cleanup %s in %s", job_id, delay)
        return job

    def has_pending_cleanup(self) -> bool:
        """True while a cleanup job is queued, scheduled or running"""
        job_ids = (
            list(self._queue.job_ids)
            + list(self._queue.scheduled_job_registry.get_job_ids())
            + list(self._queue.started_job_registry.get_job_ids())
        )
        return any(job_id.startswith(CLEANUP_JOB_PREFIX) for job_id in job_ids)

    def ensure_cleanup_scheduled(self):
        """
        Start the cleanup chain unless one already exists.
        Each run reschedules itself, so seeding again would start a second chain.
        """
        if self.has_pending_cleanup():
            logger.info("Token cleanup already scheduled")
            return None
        return self.schedule_cleanup()
