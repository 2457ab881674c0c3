"""
Function tracing decorator.

Routes trace output through the OutputManager singleton at level 3
on the 'trace' channel.
"""

import functools
import inspect

from .levels import DEBUG


def _short_repr(value):
    if isinstance(value, str) and len(value) > 50:
        return f"'{value[:47]}...'"
    if isinstance(value, (list, tuple)) and len(value) > 3:
        return f"[...{len(value)} items...]"
    return repr(value)


def trace(func):
    """Decorator to trace function calls via the OutputManager.

    Shows function entry/exit with arguments and return values
    when the 'trace' channel is active at level 3.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        # Lazy import to avoid circular dependency
        from .manager import get_output

        out = get_output()
        if not out.channel_active('trace', DEBUG):
            return func(*args, **kwargs)

        module = inspect.getmodule(func)
        module_name = module.__name__ if module else "unknown"
        func_name = func.__qualname__

        # Methods show their receiver as 'self'
        params = list(inspect.signature(func).parameters)
        if args and params and params[0] == 'self':
            args_repr = ['self'] + [_short_repr(a) for a in args[1:]]
        else:
            args_repr = [_short_repr(a) for a in args]
        args_repr.extend(f"{k}={_short_repr(v)}" for k, v in kwargs.items())

        out.emit(DEBUG, "[TRACE] >> {mod}.{fn}({args})", channel='trace',
                 mod=module_name, fn=func_name, args=', '.join(args_repr))
        try:
            result = func(*args, **kwargs)
        except BaseException as e:
            out.emit(DEBUG, "[TRACE] !! {mod}.{fn} raised: {exc}: {msg}",
                     channel='trace', mod=module_name, fn=func_name,
                     exc=type(e).__name__, msg=str(e))
            raise
        if result is not None:
            out.emit(DEBUG, "[TRACE] << {mod}.{fn} returned: {val}",
                     channel='trace', mod=module_name, fn=func_name,
                     val=_short_repr(result))
        return result

    return wrapper
