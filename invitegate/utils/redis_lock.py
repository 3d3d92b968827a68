import secrets
import time
from redis import Redis
from typing import Optional

# delete the key only while it still holds our value
_RELEASE_SCRIPT = """
if redis.call('get', KEYS[1]) == ARGV[1] then
    return redis.call('del', KEYS[1])
end
return 0
"""


class LockNotAcquired(Exception):
    """Raised when a RedisLock can't be taken within its timeout"""


class RedisLock:
    def __init__(self, redis_client: Redis, lock_key: str, expire_seconds: int = 300):
        """
        Initialize a Redis-based lock shared by every worker process
        :param redis_client: Redis client instance
        :param lock_key: Unique key for the lock
        :param expire_seconds: Lock expiry time in seconds, so a crashed holder can't block forever
        """
        self.redis = redis_client
        self.lock_key = f"lock:{lock_key}"
        self.expire_seconds = expire_seconds
        self._value: Optional[str] = None

    def acquire(self, timeout: float = 0, retry_delay: float = 0.5) -> bool:
        """
        Acquire the lock, retrying until timeout
        :return: True if lock acquired, False otherwise
        """
        value = secrets.token_hex(16)
        end_time = time.monotonic() + timeout

        while True:
            if self.redis.set(self.lock_key, value, ex=self.expire_seconds, nx=True):
                self._value = value
                return True

            if time.monotonic() >= end_time:
                return False
            time.sleep(retry_delay)

    def release(self) -> bool:
        """
        Release the lock if owned
        :return: True if lock was released, False if not owned
        """
        if self._value is None:
            return False

        released = self.redis.eval(_RELEASE_SCRIPT, 1, self.lock_key, self._value)
        self._value = None
        return bool(released)

    def __enter__(self):
        if not self.acquire():
            raise LockNotAcquired(f"Could not acquire lock for {self.lock_key}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()
