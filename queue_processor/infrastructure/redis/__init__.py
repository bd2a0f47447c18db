from .redis_client import RedisClient, close_redis, get_redis_client

__all__ = ["RedisClient", "close_redis", "get_redis_client"]
