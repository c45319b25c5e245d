"""
Runtime type metadata: record field names and sum-type variants.

Heap records and variants carry only a type hash and, for variants, a variant id.
Their field and variant names live in a `TypeRegistry`, a hash-bucketed table
keyed by type hash. Lookups that find nothing return NOT_FOUND, which the
renderer turns into a placeholder.

Option, Result and List are core types of every runtime. Their hashes are
fixed here and the renderer names their variants from built-in tables without
touching the registry.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Iterable, Sequence

# Third-party ----------------------------------------------------------------------------------------------------------
from frozendict import frozendict

# Local ----------------------------------------------------------------------------------------------------------------
from .sentinels import NOT_FOUND, NotFoundType

# Constants ------------------------------------------------------------------------------------------------------------

_FNV_OFFSET = 0xCBF29CE484222325
_FNV_PRIME = 0x100000001B3
_HASH_MASK = (1 << 64) - 1

DEFAULT_BUCKET_COUNT = 64


def type_hash(name: str) -> int:
    """Hash a type name to a 64-bit type hash (FNV-1a over UTF-8)."""
    if not isinstance(name, str):
        raise TypeError(f"type name must be a str, got {type(name).__name__}")
    h = _FNV_OFFSET
    for byte in name.encode("utf-8"):
        h ^= byte
        h = (h * _FNV_PRIME) & _HASH_MASK
    return h


OPTION_TYPE_HASH = type_hash("Option")
RESULT_TYPE_HASH = type_hash("Result")
LIST_TYPE_HASH = type_hash("List")

OPTION_NONE = 0
OPTION_SOME = 1
RESULT_OK = 0
RESULT_ERR = 1
LIST_NIL = 0
LIST_CONS = 1

BUILTIN_VARIANT_NAMES = frozendict({
    OPTION_TYPE_HASH: ("None", "Some"),
    RESULT_TYPE_HASH: ("Ok", "Err"),
})


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class RecordMetadata:
    """Shape of a record type: its ordered field names."""
    type_hash: int
    name: str
    field_names: tuple[str, ...]


@dataclass(frozen=True)
class VariantInfo:
    """
    One alternative of a sum type.

    Attributes:
        variant_id: Id stored in the heap object's header.
        name: Display name of the variant.
        arity: Number of payload words.
        field_names: Field names for an inline-record payload, None for positional payload.
    """
    variant_id: int
    name: str
    arity: int = 0
    field_names: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        if isinstance(self.arity, bool) or not isinstance(self.arity, int) or self.arity < 0:
            raise ValueError(f"VariantInfo.arity must be an int >=0, got {self.arity!r}")
        if self.field_names is not None and len(self.field_names) != self.arity:
            raise ValueError(
                f"variant {self.name!r} declares {self.arity} payload words but "
                f"{len(self.field_names)} field names"
            )

    @property
    def is_record(self) -> bool:
        """True if the payload renders as an inline record."""
        return self.field_names is not None


@dataclass(frozen=True)
class SumMetadata:
    """Shape of a sum type: its variants."""
    type_hash: int
    name: str
    variants: tuple[VariantInfo, ...]


MetadataBlock = RecordMetadata | SumMetadata


class TypeRegistry:
    """
    Hash-bucketed, read-only-at-render-time table of type metadata.

    A type hash selects bucket `type_hash % bucket_count`, whose entries are
    scanned linearly for an exact hash match. Buckets are stored in a frozendict
    and registration replaces the whole mapping, so a render that captured
    the registry keeps seeing a consistent snapshot.

    Examples:
        >>> registry = TypeRegistry()
        >>> point = registry.register_record("Point", ["x", "y"])
        >>> registry.field_names(registry.find_type(point), 2)
        ['x', 'y']
        >>> registry.find_type(12345)
        <NOT_FOUND>
    """

    def __init__(self, bucket_count: int = DEFAULT_BUCKET_COUNT) -> None:
        if isinstance(bucket_count, bool) or not isinstance(bucket_count, int):
            raise TypeError(f"bucket_count must be an int, got {type(bucket_count).__name__}")
        if bucket_count <= 0:
            raise ValueError(f"bucket_count must be >0, got {bucket_count}")
        self._bucket_count = bucket_count
        self._buckets: frozendict = frozendict()

    @property
    def bucket_count(self) -> int:
        return self._bucket_count

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._buckets.values())

    def __contains__(self, type_hash_: int) -> bool:
        return self.find_type(type_hash_) is not NOT_FOUND

    def __repr__(self) -> str:
        return f"TypeRegistry(bucket_count={self._bucket_count}, types={len(self)})"

    # ----- Registration -----

    def register(self, block: MetadataBlock) -> int:
        """
        Add a metadata block and return its type hash.

        Raises:
            TypeError: If block is not a RecordMetadata or SumMetadata.
            ValueError: If the type hash is already registered.
        """
        if not isinstance(block, (RecordMetadata, SumMetadata)):
            raise TypeError(f"expected RecordMetadata or SumMetadata, got {type(block).__name__}")
        if block.type_hash in self:
            raise ValueError(f"type hash {block.type_hash:#x} already registered")
        index = self._bucket_index(block.type_hash)
        bucket = self._buckets.get(index, ())
        self._buckets = self._buckets.set(index, bucket + (block,))
        return block.type_hash

    def register_record(self, name: str, field_names: Iterable[str], *, type_hash_: int | None = None) -> int:
        """Register a record type; the hash defaults to type_hash(name)."""
        th = type_hash(name) if type_hash_ is None else type_hash_
        fields = ensure_names(field_names)
        return self.register(RecordMetadata(th, name, fields))

    def register_sum(self, name: str, variants: Iterable[VariantInfo | tuple], *,
                     type_hash_: int | None = None) -> int:
        """
        Register a sum type; the hash defaults to type_hash(name).

        Variants may be given as VariantInfo or as tuples of VariantInfo arguments,
        e.g. `(0, "Circle", 1)` or `(1, "Rect", 2, ("w", "h"))`.
        """
        th = type_hash(name) if type_hash_ is None else type_hash_
        infos = []
        for v in variants:
            info = v if isinstance(v, VariantInfo) else VariantInfo(*v)
            if info.field_names is not None:
                info = VariantInfo(info.variant_id, info.name, info.arity, ensure_names(info.field_names))
            infos.append(info)
        ids = [v.variant_id for v in infos]
        if len(ids) != len(set(ids)):
            raise ValueError(f"duplicate variant ids in sum type {name!r}: {ids}")
        return self.register(SumMetadata(th, name, tuple(infos)))

    # ----- Lookup -----

    def find_type(self, type_hash_: int) -> MetadataBlock | NotFoundType:
        """Find the metadata block for a type hash, or NOT_FOUND."""
        for block in self._buckets.get(self._bucket_index(type_hash_), ()):
            if block.type_hash == type_hash_:
                return block
        return NOT_FOUND

    def field_names(self, block: MetadataBlock | NotFoundType, arity: int) -> list[str] | NotFoundType:
        """
        Field names for the first `arity` fields of a record, as a new list.

        Returns NOT_FOUND if block is not a record or declares fewer than `arity` names.
        """
        if not isinstance(block, RecordMetadata) or len(block.field_names) < arity:
            return NOT_FOUND
        return list(block.field_names[:arity])

    def variant_info(self, block: MetadataBlock | NotFoundType, variant_id: int) -> VariantInfo | NotFoundType:
        """Variant of a sum type by id, or NOT_FOUND."""
        if not isinstance(block, SumMetadata):
            return NOT_FOUND
        for info in block.variants:
            if info.variant_id == variant_id:
                return info
        return NOT_FOUND

    # ----- Private -----

    def _bucket_index(self, type_hash_: int) -> int:
        return type_hash_ % self._bucket_count


def builtin_variant_name(type_hash_: int, variant_id: int) -> str | NotFoundType:
    """Variant name of a built-in Option or Result value, or NOT_FOUND."""
    names = BUILTIN_VARIANT_NAMES.get(type_hash_)
    if names is None or not 0 <= variant_id < len(names):
        return NOT_FOUND
    return names[variant_id]


def is_builtin_sum(type_hash_: int) -> bool:
    return type_hash_ in BUILTIN_VARIANT_NAMES


def ensure_names(names: Sequence[str]) -> tuple[str, ...]:
    """Validate a sequence of field names and return them as a tuple."""
    out = tuple(names)
    for n in out:
        if not isinstance(n, str):
            raise TypeError(f"field names must be str, got {type(n).__name__}")
    return out
