"""Keyed file persistence with pluggable serialization formats."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import yaml

Serializer = Callable[[Any], str]
Deserializer = Callable[[str], Any]

PATH_KINDS = ("file", "directory", "symlink")


class StoreError(ValueError):
    """Raised when a file cannot be serialized, parsed or inspected."""


class FormatRegistry:
    """Serializers and deserializers keyed by case-insensitive format name."""

    def __init__(self) -> None:
        self._serializers: dict[str, Serializer] = {}
        self._deserializers: dict[str, Deserializer] = {}

    def register_serializer(self, fmt: str, func: Serializer) -> None:
        self._serializers[fmt.lower()] = func

    def register_deserializer(self, fmt: str, func: Deserializer) -> None:
        self._deserializers[fmt.lower()] = func

    def get_serializer(self, fmt: str) -> Serializer | None:
        return self._serializers.get(fmt.lower())

    def get_deserializer(self, fmt: str) -> Deserializer | None:
        return self._deserializers.get(fmt.lower())

    def serialize(self, data: Any, fmt: str) -> str:
        serializer = self.get_serializer(fmt)
        if serializer is None:
            raise StoreError(f"no serializer registered for format {fmt}")
        return serializer(data)

    def deserialize(self, raw: str, fmt: str) -> Any:
        deserializer = self.get_deserializer(fmt)
        if deserializer is None:
            raise StoreError(f"no deserializer registered for format {fmt}")
        return deserializer(raw)


def _dump_json(data: Any) -> str:
    return json.dumps(data, sort_keys=True, indent=2) + "\n"


def _dump_yaml(data: Any) -> str:
    return yaml.safe_dump(data, sort_keys=True)


def default_registry() -> FormatRegistry:
    registry = FormatRegistry()
    registry.register_serializer("json", _dump_json)
    registry.register_deserializer("json", json.loads)
    registry.register_serializer("yaml", _dump_yaml)
    registry.register_deserializer("yaml", yaml.safe_load)
    return registry


class FileStore:
    def __init__(self, registry: FormatRegistry | None = None) -> None:
        self.registry = registry or default_registry()

    def read(self, path: str | Path, fmt: str | None = None) -> Any:
        try:
            raw = Path(path).read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise StoreError(f"{path} is not valid utf-8: {exc}") from exc
        except OSError as exc:
            raise StoreError(f"cannot read {path}: {exc}") from exc
        if fmt is None:
            return raw
        try:
            return self.registry.deserialize(raw, fmt)
        except StoreError:
            raise
        except (ValueError, yaml.YAMLError) as exc:
            raise StoreError(f"invalid {fmt} in {path}: {exc}") from exc

    def write(self, path: str | Path, data: Any, fmt: str | None = None) -> Path:
        target = Path(path)
        text = self.registry.serialize(data, fmt) if fmt else data
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
        return target

    def delete(self, path: str | Path) -> None:
        target = Path(path)
        try:
            if self.exists(target, "directory"):
                target.rmdir()
            else:
                target.unlink()
        except FileNotFoundError:
            pass

    def exists(self, path: str | Path, kind: str | None = None) -> bool:
        if kind is not None and kind not in PATH_KINDS:
            raise StoreError(f"unknown path type {kind}")
        target = Path(path)
        if kind == "symlink":
            return target.is_symlink()
        if not target.exists():
            return False
        if kind == "file":
            return target.is_file()
        if kind == "directory":
            return target.is_dir()
        return True
