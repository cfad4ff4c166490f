import threading
from typing import Any, Optional

import diskcache

from trustcheck.config import CACHE_DIR

_cache = diskcache.Cache(CACHE_DIR)
_lock = threading.Lock()


def get_cache(key: str) -> Optional[Any]:
    with _lock:
        return _cache.get(key)


def set_cache(key: str, value: Any, expire: int = 300) -> None:
    if expire <= 0:
        return
    with _lock:
        _cache.set(key, value, expire=expire)
