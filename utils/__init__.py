import logging
import time
from functools import wraps


def timeit(func):
    """装饰器，把函数执行耗时写入 debug 日志"""

    @wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            logging.debug("%s 耗时：%.4f秒", func.__qualname__, time.perf_counter() - start_time)

    return wrapper
