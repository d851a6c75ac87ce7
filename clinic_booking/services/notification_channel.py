"""
Notification channels for time-deferred local reminders

A channel accepts one-shot notifications keyed by a caller-chosen channel id
and can cancel them by that same id. Two implementations:

- ArqNotificationChannel: deferred arq jobs in Redis, delivered by the worker
- InMemoryNotificationChannel: process-local, for tests and Redis-less setups
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from arq import create_pool
from arq.connections import ArqRedis, RedisSettings
from arq.constants import default_queue_name, job_key_prefix, result_key_prefix

from ..exceptions import NotificationSchedulingFailure

logger = logging.getLogger(__name__)

CHANNELS_KEY = "clinic_booking:notification_channels"
DELIVER_TASK = "deliver_notification_task"


@dataclass
class ChannelInfo:
    channel_id: str
    display_name: str
    description: str
    importance: str = "high"
    vibrate: bool = True


@dataclass
class ScheduledNotification:
    channel_id: str
    title: str
    message: str
    fire_time: datetime


class NotificationChannel:
    """Interface every channel implements. All operations are awaitable."""

    async def create_channel(
        self,
        channel_id: str,
        display_name: str,
        description: str,
        importance: str = "high",
        vibrate: bool = True,
    ) -> None:
        raise NotImplementedError

    async def schedule_at(
        self, channel_id: str, title: str, message: str, fire_time: datetime
    ) -> None:
        raise NotImplementedError

    async def cancel(self, channel_id: str) -> None:
        raise NotImplementedError

    async def close(self) -> None:
        return None


class InMemoryNotificationChannel(NotificationChannel):
    def __init__(self):
        self.channels: dict[str, ChannelInfo] = {}
        self.scheduled: dict[str, ScheduledNotification] = {}

    async def create_channel(
        self,
        channel_id: str,
        display_name: str,
        description: str,
        importance: str = "high",
        vibrate: bool = True,
    ) -> None:
        self.channels[channel_id] = ChannelInfo(
            channel_id, display_name, description, importance, vibrate
        )

    async def schedule_at(
        self, channel_id: str, title: str, message: str, fire_time: datetime
    ) -> None:
        if channel_id in self.scheduled:
            raise NotificationSchedulingFailure(channel_id, "already scheduled")
        self.scheduled[channel_id] = ScheduledNotification(channel_id, title, message, fire_time)

    async def cancel(self, channel_id: str) -> None:
        self.scheduled.pop(channel_id, None)


class ArqNotificationChannel(NotificationChannel):
    """
    Reminders as deferred arq jobs.

    The channel id doubles as the arq job id, so a scheduled reminder can be
    removed again knowing only its id.
    """

    def __init__(self, redis: ArqRedis, queue_name: str = default_queue_name):
        self.redis = redis
        self.queue_name = queue_name

    @classmethod
    async def connect(cls, redis_settings: RedisSettings) -> "ArqNotificationChannel":
        pool = await create_pool(redis_settings)
        logger.info("✅ Reminder queue connected")
        return cls(pool)

    async def create_channel(
        self,
        channel_id: str,
        display_name: str,
        description: str,
        importance: str = "high",
        vibrate: bool = True,
    ) -> None:
        payload = {
            "displayName": display_name,
            "description": description,
            "importance": importance,
            "vibrate": vibrate,
        }
        await self.redis.hset(CHANNELS_KEY, channel_id, json.dumps(payload))

    async def schedule_at(
        self, channel_id: str, title: str, message: str, fire_time: datetime
    ) -> None:
        job = await self.redis.enqueue_job(
            DELIVER_TASK,
            channel_id,
            title,
            message,
            _job_id=channel_id,
            _defer_until=fire_time,
            _queue_name=self.queue_name,
        )
        if job is None:
            # arq refuses a job id that is still queued or has a kept result
            raise NotificationSchedulingFailure(channel_id, "a job with this id already exists")
        logger.debug(f"📅 Queued {channel_id} for {fire_time.isoformat()}")

    async def cancel(self, channel_id: str) -> None:
        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.zrem(self.queue_name, channel_id)
            pipe.delete(job_key_prefix + channel_id, result_key_prefix + channel_id)
            pipe.hdel(CHANNELS_KEY, channel_id)
            await pipe.execute()

    async def close(self) -> None:
        await self.redis.close()


async def build_notification_channel(
    enabled: bool, redis_settings: Optional[RedisSettings] = None
) -> NotificationChannel:
    """Connect to the reminder queue, falling back to memory when disabled or unreachable"""
    if not enabled or redis_settings is None:
        logger.info("ℹ️ Notifications disabled - reminders kept in memory")
        return InMemoryNotificationChannel()
    try:
        return await ArqNotificationChannel.connect(redis_settings)
    except Exception as e:
        logger.warning(f"⚠️ Reminder queue unavailable, keeping reminders in memory: {e}")
        return InMemoryNotificationChannel()
