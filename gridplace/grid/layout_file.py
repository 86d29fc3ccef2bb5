"""
Layout Persistence

Versioned layout documents, as exchanged by export and import:

```json
{
  "components": [
    {"id": "1", "type": "chart",
     "position": {"col": 0, "row": 0, "width": 6, "height": 6}}
  ],
  "version": "1.0.0",
  "lastModified": "2026-01-14T10:30:00+00:00"
}
```

Documents are stored as JSON, or as YAML when the file name ends in
.yaml/.yml. A document is validated in full before anything uses it, so
a bad document never leaves a half-imported arrangement behind.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .abstraction import Component, ComponentKind, GridRect, GRID_COLUMNS

logger = logging.getLogger(__name__)

LAYOUT_VERSION = "1.0.0"
YAML_SUFFIXES = {".yaml", ".yml"}
POSITION_FIELDS = ("col", "row", "width", "height")


class LayoutValidationError(ValueError):
    """A layout document has the wrong shape or impossible geometry."""


@dataclass
class ComponentState:
    """Serialized form of one component."""
    id: str
    kind: ComponentKind
    rect: GridRect

    @classmethod
    def from_component(cls, component: Component) -> "ComponentState":
        return cls(id=component.id, kind=component.kind, rect=component.rect)

    def to_component(self) -> Component:
        return Component(id=self.id, kind=self.kind, rect=self.rect)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.kind.value,
            "position": self.rect.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Any, index: int = 0) -> "ComponentState":
        """Parse and validate one entry of `components`."""
        where = f"components[{index}]"
        if not isinstance(data, dict):
            raise LayoutValidationError(f"{where} must be an object")

        component_id = data.get("id")
        if not isinstance(component_id, str) or not component_id:
            raise LayoutValidationError(f"{where}.id must be a non-empty string")

        try:
            kind = ComponentKind(data.get("type"))
        except ValueError:
            raise LayoutValidationError(
                f"{where}.type must be one of {[k.value for k in ComponentKind]}, "
                f"got {data.get('type')!r}"
            ) from None

        position = data.get("position")
        if not isinstance(position, dict):
            raise LayoutValidationError(f"{where}.position must be an object")
        values = {}
        for name in POSITION_FIELDS:
            value = position.get(name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise LayoutValidationError(f"{where}.position.{name} must be an integer")
            values[name] = value

        rect = GridRect(**values)
        if not rect.in_bounds():
            raise LayoutValidationError(
                f"{where} ({component_id}) is out of bounds: {rect.as_tuple()} "
                f"(grid is {GRID_COLUMNS} columns wide)"
            )
        return cls(id=component_id, kind=kind, rect=rect)


@dataclass
class LayoutDocument:
    """A complete, versioned arrangement."""
    components: List[ComponentState] = field(default_factory=list)
    version: str = LAYOUT_VERSION
    last_modified: Optional[datetime] = None

    @classmethod
    def from_components(cls, components: List[Component]) -> "LayoutDocument":
        """Document for an arrangement, stamped with the current time."""
        return cls(
            components=[ComponentState.from_component(c) for c in components],
            last_modified=datetime.now(timezone.utc),
        )

    def to_components(self) -> List[Component]:
        return [state.to_component() for state in self.components]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-compatible dictionary."""
        return {
            "components": [state.to_dict() for state in self.components],
            "version": self.version,
            "lastModified": self.last_modified.isoformat() if self.last_modified else None,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "LayoutDocument":
        """
        Parse and validate a document.

        Raises:
            LayoutValidationError: if `components` is missing or not a list,
                an entry is malformed, or ids are duplicated
        """
        if not isinstance(data, dict):
            raise LayoutValidationError("Layout document must be an object")
        if "components" not in data:
            raise LayoutValidationError("Layout document has no 'components'")

        entries = data["components"]
        if not isinstance(entries, list):
            raise LayoutValidationError("'components' must be a list")

        states = [ComponentState.from_dict(entry, i) for i, entry in enumerate(entries)]

        seen = set()
        for state in states:
            if state.id in seen:
                raise LayoutValidationError(f"Duplicate component id: {state.id}")
            seen.add(state.id)

        return cls(
            components=states,
            version=str(data.get("version", LAYOUT_VERSION)),
            last_modified=_parse_timestamp(data.get("lastModified")),
        )

    def next_id(self) -> int:
        """One past the largest numeric id (ids that are not numbers are skipped)."""
        numeric = []
        for state in self.components:
            try:
                numeric.append(int(state.id))
            except ValueError:
                continue
        return max(numeric, default=0) + 1

    def __repr__(self) -> str:
        return (
            f"LayoutDocument(version={self.version}, "
            f"components={len(self.components)})"
        )


def _parse_timestamp(value: Any) -> Optional[datetime]:
    """lastModified is advisory; unreadable values are dropped."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        logger.warning("Ignoring unreadable lastModified: %r", value)
        return None


def dumps(document: LayoutDocument, indent: int = 2) -> str:
    """Serialize to JSON."""
    return json.dumps(document.to_dict(), indent=indent)


def loads(text: str) -> LayoutDocument:
    """Parse JSON text into a validated document."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise LayoutValidationError(f"Invalid JSON: {e}") from e
    return LayoutDocument.from_dict(data)


def read_layout_file(path: Union[str, Path]) -> LayoutDocument:
    """
    Read a layout document from disk.

    Raises:
        FileNotFoundError: if the file does not exist
        LayoutValidationError: if the content is not a valid document
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Layout file not found: {path}")

    content = path.read_text()
    if path.suffix.lower() in YAML_SUFFIXES:
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise LayoutValidationError(f"Invalid YAML in {path}: {e}") from e
        document = LayoutDocument.from_dict(data)
    else:
        document = loads(content)

    logger.debug("Loaded layout file %s: %r", path, document)
    return document


def write_layout_file(document: LayoutDocument, path: Union[str, Path]):
    """Write a layout document as JSON, or YAML by file suffix."""
    path = Path(path)
    if path.suffix.lower() in YAML_SUFFIXES:
        content = yaml.safe_dump(document.to_dict(), default_flow_style=False, sort_keys=False)
    else:
        content = dumps(document) + "\n"
    path.write_text(content)
    logger.debug("Wrote layout file %s: %r", path, document)
