# core/cache_manager.py

import asyncio
import hashlib
from collections import defaultdict
from typing import Any, Dict, Optional

from diskcache import Cache

from .log import get_logger

# 模块级 logger
logger = get_logger(__name__)

# 默认缓存有效期：1小时 (3600 秒)
CACHE_EXPIRATION = 3600

_cache: Optional[Cache] = None
_cache_lock = asyncio.Lock() # 用于保护 _cache_stats 的锁
_cache_stats = defaultdict(int)

def init_cache(cache_dir: str, size_limit_mb: int = 64):
    """
    初始化原始响应缓存。
    重复调用时保留第一次创建的缓存。
    """
    global _cache
    if _cache is None:
        _cache = Cache(cache_dir, size_limit=size_limit_mb * 1024 * 1024)
        logger.info(f"GSA[CacheManager]: 缓存已在路径 '{cache_dir}' 初始化")

def close_cache():
    """关闭缓存并允许之后重新初始化"""
    global _cache
    if _cache is not None:
        _cache.close()
        _cache = None

def is_initialized() -> bool:
    return _cache is not None

def _ensure_cache_initialized():
    """确保缓存已被初始化，否则抛出异常"""
    if _cache is None:
        raise RuntimeError(
            "Cache has not been initialized. "
            "Please call init_cache() before using it."
        )

async def get(key: str) -> Optional[Any]:
    """
    根据键，从缓存中异步获取数据。
    """
    _ensure_cache_initialized()
    value = await asyncio.to_thread(_cache.get, key)

    async with _cache_lock:
        if value is not None:
            _cache_stats["hits"] += 1
            logger.debug(f"GSA[CacheManager]: 缓存命中 (Key: {key})")
        else:
            _cache_stats["misses"] += 1
            logger.debug(f"GSA[CacheManager]: 缓存未命中 (Key: {key})")
    return value

async def set(key: str, value: Any, expire: int = CACHE_EXPIRATION):
    """
    将一个键和对应的值异步存入缓存。
    写入失败只记录日志，不影响本次检索。
    """
    _ensure_cache_initialized()
    try:
        await asyncio.to_thread(_cache.set, key, value, expire=expire)
        logger.debug(f"GSA[CacheManager]: 成功写入缓存 (Key: {key}, Expire: {expire}s)")
    except Exception as e:
        logger.error(f"GSA[CacheManager]: 写入缓存失败 (key: {key})", exc_info=e)

def build_response_key(url: str) -> str:
    """为完整请求 URL 构建缓存键"""
    digest = hashlib.sha256(url.encode("utf-8")).hexdigest()
    return f"response:{digest}"

async def get_cache_stats() -> Dict[str, float]:
    """
    异步获取缓存统计信息
    """
    async with _cache_lock:
        stats = dict(_cache_stats)
    # 确保hits和misses键存在
    stats.setdefault("hits", 0)
    stats.setdefault("misses", 0)
    total = stats["hits"] + stats["misses"]
    if total > 0:
        stats["hit_rate"] = round(stats["hits"] / total, 4)
    else:
        stats["hit_rate"] = 0.0
    return stats

async def reset_cache_stats():
    """
    异步重置缓存统计信息
    """
    global _cache_stats
    async with _cache_lock:
        _cache_stats = defaultdict(int)
