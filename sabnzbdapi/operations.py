"""
Declared-but-unimplemented API operations.

SABnzbd exposes more of its API than this client wraps.  Rather than
leaving those methods out, the client declares them with
:class:`NotImplementedOperation` so that callers get a clear
``NotImplementedError`` instead of an ``AttributeError``, and can ask
the client up front which operations it supports.
"""

from __future__ import annotations

from typing import Any, Optional

from .exceptions import OperationNotImplemented


class NotImplementedOperation:
    """Descriptor standing in for an API operation with no implementation.

    Accessed on a client instance it yields a callable that accepts any
    arguments and raises :class:`OperationNotImplemented` without doing
    any I/O.  Accessed on the class it returns the descriptor itself,
    which is what capability probing looks for.
    """

    def __init__(self, doc: str = "") -> None:
        self.name = ""
        self.__doc__ = doc

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, instance: Optional[object], owner: Optional[type] = None) -> Any:
        if instance is None:
            return self
        name = self.name

        def _not_implemented(*args: Any, **kwargs: Any) -> Any:
            raise OperationNotImplemented(name)

        _not_implemented.__name__ = name
        _not_implemented.__doc__ = self.__doc__
        return _not_implemented

    def __repr__(self) -> str:
        return f"<NotImplementedOperation {self.name}>"


def is_implemented(attr: Any) -> bool:
    """Return False only for :class:`NotImplementedOperation` variants."""
    return not isinstance(attr, NotImplementedOperation)


def unimplemented_names(cls: type) -> list[str]:
    """Sorted names of every unimplemented operation declared on ``cls``."""
    names = set()
    for klass in cls.__mro__:
        for name, attr in vars(klass).items():
            if isinstance(attr, NotImplementedOperation):
                names.add(name)
    return sorted(names)


__all__ = [
    "NotImplementedOperation",
    "is_implemented",
    "unimplemented_names",
]
