"""
Sentinel objects for lookups and optional arguments.

Metadata lookups in tagview may legitimately find nothing, and optional
arguments need to tell "not given" apart from a value (`Heap.alloc_option()`
without a value builds None). Both cases are covered by singleton
sentinels compared by identity.

Sentinels:
    NOT_FOUND: Result of a failed type metadata or variant lookup
    UNSET: Marks an optional argument that was not provided

Helper Functions:
    iffound: Return default if value is NOT_FOUND, otherwise return value

Example:
    >>> block = registry.find_type(type_hash)
    >>> if block is NOT_FOUND:
    ...     return PlaceholderShape("<record value>")
"""

from typing import Any, Final

__all__ = [
    'NOT_FOUND',
    'UNSET',
    'NotFoundType',
    'UnsetType',
    'iffound',
]


# Base Sentinel --------------------------------------------------------------------------------------------------------

class _SentinelBase:
    """
    Base class for sentinel singletons.

    Sentinels are falsy, hash by identity and keep their identity when pickled.
    """
    __slots__ = ('_name',)

    def __init__(self, name: str) -> None:
        self._name = name

    def __repr__(self) -> str:
        return f'<{self._name}>'

    def __eq__(self, other: Any) -> bool:
        return self is other

    def __hash__(self) -> int:
        return id(self)

    def __bool__(self) -> bool:
        return False


# Sentinel Types -------------------------------------------------------------------------------------------------------

class NotFoundType(_SentinelBase):
    """
    Sentinel type for NOT_FOUND.

    Returned by TypeRegistry lookups when a type hash, variant id or field list
    cannot be resolved. Absence is a valid outcome, not an error.
    """
    _instance: 'NotFoundType | None' = None

    def __new__(cls) -> 'NotFoundType':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if not hasattr(self, '_name'):
            super().__init__("NOT_FOUND")

    def __reduce__(self) -> tuple:
        return (self.__class__, ())


class UnsetType(_SentinelBase):
    """
    Sentinel type for UNSET.

    Marks an argument that was not provided, where None is a meaningful value.
    """
    _instance: 'UnsetType | None' = None

    def __new__(cls) -> 'UnsetType':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if not hasattr(self, '_name'):
            super().__init__("UNSET")

    def __reduce__(self) -> tuple:
        return (self.__class__, ())


# Sentinel Instances ---------------------------------------------------------------------------------------------------

NOT_FOUND: Final[NotFoundType] = NotFoundType()
UNSET: Final[UnsetType] = UnsetType()


# Helpers --------------------------------------------------------------------------------------------------------------

def iffound(value: Any, default: Any = None) -> Any:
    """
    Return default if value is NOT_FOUND, otherwise return value.

    Examples:
        >>> iffound(registry.find_type(0xdead), default="anonymous")
        'anonymous'
    """
    return default if value is NOT_FOUND else value
