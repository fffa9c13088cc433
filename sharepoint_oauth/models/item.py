"""List item entity, the most common consumer of lenient re-hydration."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from sharepoint_oauth.models.hydration import HydratedEntity, PropertyMap


class ListItem(HydratedEntity):
    """A SharePoint list item as returned with ``odata=verbose``."""

    property_map = {
        "type": "__metadata.type",
        "id": "Id",
        "guid": "GUID",
        "title": "Title",
    }

    def __init__(self, json_data: Mapping[str, Any], extra: Optional[PropertyMap] = None) -> None:
        super().__init__(extra)
        self.hydrate(json_data)

    def merge_payload(self, properties: Mapping[str, Any]) -> Dict[str, Any]:
        """Body for a ``MERGE`` update, always carrying the item's metadata type."""
        payload = dict(properties)
        payload["__metadata"] = {"type": self.type}
        return payload

    def apply_update(self, properties: Mapping[str, Any]) -> "ListItem":
        """Reflect a successful ``MERGE`` that returned no body.

        SharePoint answers updates with an empty response, so the entity is
        re-hydrated from the properties that were sent.
        """
        self.update(self.merge_payload(properties))
        return self


__all__ = ["ListItem"]
