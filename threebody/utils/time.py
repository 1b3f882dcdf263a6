import functools
import logging
from timeit import default_timer as timer
from typing import Any, Callable, Optional, Tuple

_logger = logging.getLogger(__name__)


def time(
    function_name: Optional[str] = None, level: int = logging.INFO
) -> Callable:
    """
    Returns a decorator that measures the run time of the decorated function
    and logs it under the provided name.

    The decorated function returns a tuple of the value returned by the
    original function and its run time in seconds.

    :param function_name: the name to log the run time under; if it is None,
        the name of the decorated function is used
    :param level: the logging level of the run time record
    :return: the decorator
    """

    def decorator(function: Callable) -> Callable:
        name = function.__name__ if function_name is None else function_name

        @functools.wraps(function)
        def timed(*args: Any, **kwargs: Any) -> Tuple[Any, float]:
            start = timer()
            value = function(*args, **kwargs)
            run_time = timer() - start
            _logger.log(level, "%s completed in %.6fs", name, run_time)
            return value, run_time

        return timed

    return decorator
