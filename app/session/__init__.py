from .session_layer import (
    init_redis,
    set_redis_client,
    get_redis_client,
    create_session,
    get_session,
    remove_session,
    extract_token,
)

__all__ = [
    "init_redis",
    "set_redis_client",
    "get_redis_client",
    "create_session",
    "get_session",
    "remove_session",
    "extract_token",
]
