"""Present/absent markers for partial updates.

An update payload field is either ``UNSET`` (leave untouched) or a value,
where ``None`` means "clear this field".
"""
from __future__ import annotations

from dataclasses import fields
from typing import Any, Mapping


class _Unset:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


def is_set(value: Any) -> bool:
    return value is not UNSET


class Changes:
    """Mixin for dataclasses whose fields default to ``UNSET``.

    ``payload_keys`` maps attribute names to JSON keys.
    """

    payload_keys: Mapping[str, str] = {}

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]):
        kwargs = {}
        for f in fields(cls):
            key = cls.payload_keys.get(f.name, f.name)
            if key in payload:
                kwargs[f.name] = payload[key]
        return cls(**kwargs)

    def present(self) -> frozenset[str]:
        return frozenset(f.name for f in fields(self) if is_set(getattr(self, f.name)))

    def is_empty(self) -> bool:
        return not self.present()
