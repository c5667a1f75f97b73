"""Instrumentation: wrap callables so each call records a Begin/End span pair."""

import functools
import inspect
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

from ..logging_config import get_logger
from ..tracer import ITracer

logger = get_logger(__name__)

T = TypeVar("T")

# Clock/budget accessors and object construction/attribute protocol.
DEFAULT_DENYLIST = frozenset(
    {
        "get_used",
        "limit",
        "tick_limit",
        "__init__",
        "__new__",
        "__init_subclass__",
        "__class_getitem__",
        "__getattribute__",
        "__getattr__",
        "__setattr__",
        "__delattr__",
        "__del__",
    }
)


class Instrumenter:
    """Builds timing wrappers bound to one tracer."""

    def __init__(self, tracer: ITracer):
        self._tracer = tracer

    @property
    def tracer(self) -> ITracer:
        return self._tracer

    def wrap(self, name: str, fn: Callable[..., T]) -> Callable[..., T]:
        """
        Return a callable with fn's signature that records a span per call.

        While the tracer is disabled the call passes straight through.
        Exceptions from fn propagate unchanged and leave no End span.
        """
        tracer = self._tracer

        @functools.wraps(fn)
        def wrapped(*args, **kwargs):
            if not tracer.enabled():
                return fn(*args, **kwargs)

            clock = tracer.clock
            start = clock.get_used()

            ratio = tracer.panic_tick_ratio
            if ratio is not None and start >= clock.tick_limit * ratio:
                tracer.panic_flush()

            tracer.begin_event(name, start)
            result = fn(*args, **kwargs)
            tracer.end_event(name, clock.get_used())
            return result

        return wrapped

    def profile_function(
        self, fn: Callable[..., T], name: str | None = None
    ) -> Callable[..., T]:
        """Wrap fn under name, or its own __name__; unnamed callables come back as-is."""
        fn_name = name or getattr(fn, "__name__", None)
        if not fn_name:
            logger.warning(
                "Couldn't find a function name for %r, will not profile it", fn
            )
            return fn

        return self.wrap(fn_name, fn)

    def traced(
        self, name: str | None = None
    ) -> Callable[[Callable[..., T]], Callable[..., T]]:
        """Decorator form of profile_function."""

        def decorator(fn: Callable[..., T]) -> Callable[..., T]:
            return self.profile_function(fn, name)

        return decorator

    def wrap_all(
        self, target: Any, label: str, denylist: Iterable[str] | None = None
    ) -> Any:
        """
        Instrument every callable member of target in place.

        Classes have their own class dictionary instrumented, so all
        instances are affected; any other object (module, namespace,
        instance) has its own attribute dictionary instrumented.
        Properties (and property subclasses) get their getter and setter
        wrapped as "label.member:get" / "label.member:set". On a class,
        callables that are not plain functions (builtins, partials,
        callable instances) are installed as staticmethods so they keep
        their call signature. Members the owner refuses to redefine are
        skipped.

        Returns:
            target, for chaining.
        """
        skip = DEFAULT_DENYLIST if denylist is None else frozenset(denylist)

        in_class = isinstance(target, type)
        members = getattr(target, "__dict__", None)
        if members is None:
            logger.debug("Nothing to instrument on %r", target)
            return target

        for member_name, member in list(members.items()):
            if member_name in skip:
                continue

            extended_label = f"{label}.{member_name}" if label else member_name
            replacement = self._instrument_member(member, extended_label, in_class)
            if replacement is None:
                continue

            try:
                setattr(target, member_name, replacement)
            except (AttributeError, TypeError):
                # read-only owner (built-in or extension type)
                continue

        return target

    def register_class(self, cls: type, name: str) -> type:
        return self.wrap_all(cls, name)

    def register_object(self, obj: Any, name: str) -> Any:
        return self.wrap_all(obj, name)

    def _instrument_member(
        self, member: Any, label: str, in_class: bool
    ) -> Any | None:
        """Instrumented replacement for one member, or None to leave it alone."""
        if isinstance(member, property):
            if member.fget is None and member.fset is None:
                return None

            fget = member.fget and self.profile_function(member.fget, f"{label}:get")
            fset = member.fset and self.profile_function(member.fset, f"{label}:set")
            return type(member)(fget, fset, member.fdel, member.__doc__)

        if isinstance(member, staticmethod):
            return staticmethod(self.profile_function(member.__func__, label))

        if isinstance(member, classmethod):
            return classmethod(self.profile_function(member.__func__, label))

        # nested classes keep their identity
        if isinstance(member, type) or not callable(member):
            return None

        replacement = self.profile_function(member, label)
        if replacement is member:
            return None

        # only plain functions bind self on instance lookup
        if in_class and not inspect.isfunction(member):
            return staticmethod(replacement)
        return replacement

    @contextmanager
    def scope(self, name: str, args: dict[str, Any] | None = None) -> Iterator[None]:
        """Record a span around a block of code."""
        tracer = self._tracer
        if not tracer.enabled():
            yield
            return

        tracer.begin_event(name, tracer.clock.get_used(), args)
        try:
            yield
        finally:
            tracer.end_event(name, tracer.clock.get_used())
