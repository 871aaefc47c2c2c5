import functools
import inspect
import logging
import time

logger = logging.getLogger(__name__)


class Profiler:
    """
    Provides a decorator to profile synchronous and asynchronous callables,
    logging their execution times at debug level.
    """

    @staticmethod
    def _report(func, start):
        elapsed = time.perf_counter() - start
        logger.debug(f"[Profiler] {func.__qualname__} took {elapsed:.4f}s")

    @staticmethod
    def profile(func):
        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                start = time.perf_counter()
                try:
                    return await func(*args, **kwargs)
                finally:
                    Profiler._report(func, start)

            return async_wrapper

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                Profiler._report(func, start)

        return sync_wrapper
