from contextlib import contextmanager

from .utils import rename


class StorageGuard:
    """
    internal mixin that freezes an object once it has been built.

    intent
    - used by descriptors to store construction-time metadata under
      non-identifier backing names (prefixed with '-') that must not be
      readable directly nor writable after build.

    rules
    - any attribute whose name starts with '-' is internal backing and cannot
      be read through normal attribute access (AttributeError).
    - once the build phase is over, no attribute can be written or deleted.

    build phase
    - toggled by the private flag '__building' on the instance.
    - this class provides a context-managed __new__ so subclasses can write
      backing fields safely:
        with super().__new__(cls) as self:
            setattr(self, "-field", value)
        # after the 'with' block, the instance is read-only.
    """

    @contextmanager
    def __new__(cls):
        self = super().__new__(cls)
        object.__setattr__(self, "_StorageGuard__building", True)
        try:
            yield self
        finally:
            object.__setattr__(self, "_StorageGuard__building", False)

    def __getattribute__(self, name, /):
        if isinstance(name, str) and name.startswith("-"):
            raise AttributeError("internal storage is not accessible")
        return object.__getattribute__(self, name)

    def __setattr__(self, name, value, /):
        if not object.__getattribute__(self, "_StorageGuard__building"):
            raise AttributeError("%s object is read-only" % type(self).__name__)
        return object.__setattr__(self, name, value)

    def __delattr__(self, name, /):
        raise AttributeError("%s object is read-only" % type(self).__name__)


def view(name):
    """
    internal: build a read-only view over a backing field.

    storage convention
    - the actual value is stored under '-' + name (e.g., '-short').
      StorageGuard prevents direct access to these names.

    behavior
    - exposes a property that returns the stored value unchanged; descriptor
      fields are strings, booleans, None or named tuples, all immutable.
    """

    @rename(name)
    def getter(self):
        return object.__getattribute__(self, "-" + name)

    return property(getter)


__all__ = (
    "StorageGuard",
    "view",
)
