"""
Declarative mapping of SharePoint JSON documents onto entities.

SharePoint's REST API wraps values in verbose envelopes such as
``d.GetContextWebInformation.FormDigestValue`` or ``__metadata.type``, and
many write operations return no body at all. Entities therefore declare a
``property_map`` of ``field -> dotted path`` and share a single resolver:

* strict mode raises ``MissingFieldError`` for the first unresolved path and
  leaves the target untouched;
* lenient mode (``allow_missing=True``) skips unresolved paths, which lets a
  caller re-apply the properties it just sent after an update.

Values are assigned verbatim. Type coercion belongs to the entity and runs
after the generic pass through ``HydratedEntity._after_hydrate``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Any, ClassVar, Dict, Optional, Tuple

from sharepoint_oauth.core.exceptions import MissingFieldError

PropertyMap = Mapping[str, str]

_MISSING = object()


def resolve_path(document: Any, path: str) -> Any:
    """Walk ``document`` along ``path`` and return the leaf.

    Returns the module-level ``_MISSING`` sentinel when a segment is absent. A
    key present with a ``None`` value resolves to ``None``.
    """
    current = document
    for segment in path.split("."):
        if isinstance(current, Mapping):
            if segment not in current:
                return _MISSING
            current = current[segment]
        elif isinstance(current, Sequence) and not isinstance(current, (str, bytes)):
            if not (segment.isascii() and segment.isdecimal()) or int(segment) >= len(current):
                return _MISSING
            current = current[int(segment)]
        else:
            return _MISSING
    return current


def merge_property_maps(
    property_map: PropertyMap, extra_map: Optional[PropertyMap] = None
) -> Dict[str, str]:
    """Return ``property_map`` extended by ``extra_map``; extra entries win."""
    merged = dict(property_map)
    if extra_map:
        merged.update(extra_map)
    return merged


def hydrate(
    target: Any,
    document: Any,
    property_map: PropertyMap,
    extra_map: Optional[PropertyMap] = None,
    allow_missing: bool = False,
) -> None:
    """Populate ``target`` from ``document``.

    Fields named in ``property_map`` are set as attributes on ``target``.
    Fields that only appear in ``extra_map`` are stored in ``target.extra``.
    """
    resolved: list[Tuple[str, Any]] = []
    for field, path in merge_property_maps(property_map, extra_map).items():
        value = resolve_path(document, path)
        if value is _MISSING:
            if not allow_missing:
                raise MissingFieldError(field, path)
            continue
        resolved.append((field, value))

    for field, value in resolved:
        if field in property_map:
            setattr(target, field, value)
        else:
            target.extra[field] = value


class HydratedEntity:
    """Base class for entities populated from SharePoint JSON documents.

    Subclasses declare ``property_map``; every key becomes an attribute that
    defaults to ``None`` until hydrated. Callers can request additional API
    fields per instance through ``extra``; those end up in ``self.extra``.
    """

    property_map: ClassVar[PropertyMap] = MappingProxyType({})

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls.property_map = MappingProxyType(dict(cls.property_map))

    def __init__(self, extra: Optional[PropertyMap] = None) -> None:
        for field in self.property_map:
            setattr(self, field, None)
        self.extra: Dict[str, Any] = {}
        self.source: Any = None
        self._extra_map: Dict[str, str] = dict(extra or {})

    @property
    def fields(self) -> PropertyMap:
        """Effective mapping used by this instance (built-in plus extra)."""
        return MappingProxyType(merge_property_maps(self.property_map, self._extra_map))

    def hydrate(self, document: Any, allow_missing: bool = False) -> None:
        """Apply ``document``; on any failure the previous state is restored."""
        fields = {field: getattr(self, field) for field in self.property_map}
        extra, source = dict(self.extra), self.source
        try:
            hydrate(self, document, self.property_map, self._extra_map, allow_missing)
            self.source = document
            self._after_hydrate()
        except Exception:
            for field, value in fields.items():
                setattr(self, field, value)
            self.extra, self.source = extra, source
            raise

    def update(self, properties: Mapping[str, Any]) -> None:
        """Re-hydrate from a partial document, keeping fields it does not carry."""
        self.hydrate(properties, allow_missing=True)

    def _after_hydrate(self) -> None:
        """Entity-specific coercion hook; runs after every hydration pass."""

    def to_dict(self) -> Dict[str, Any]:
        data = {field: getattr(self, field) for field in self.property_map}
        data["extra"] = dict(self.extra)
        return data

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        fields = ", ".join(f"{key}={getattr(self, key)!r}" for key in self.property_map)
        return f"{type(self).__name__}({fields})"


__all__ = [
    "HydratedEntity",
    "PropertyMap",
    "hydrate",
    "merge_property_maps",
    "resolve_path",
]
