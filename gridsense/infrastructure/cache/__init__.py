"""Cache implementations - Infrastructure Layer."""

from .redis_decision_cache import RedisDecisionCache

__all__ = ["RedisDecisionCache"]
