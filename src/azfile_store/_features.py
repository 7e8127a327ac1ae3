"""Feature enum and FeatureSet."""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING

from azfile_store._errors import CapabilityNotSupported

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


class Feature(enum.Enum):
    """Optional behaviors a storage handle may be configured with."""

    VIRTUAL_DIR = "virtual_dir"


class FeatureSet:
    """Immutable set of features enabled on a storage handle.

    :param features: The enabled features.
    """

    __slots__ = ("_features",)
    _features: frozenset[Feature]

    def __init__(self, features: Iterable[Feature] = ()) -> None:
        object.__setattr__(self, "_features", frozenset(features))

    def supports(self, feature: Feature) -> bool:
        """Check whether a feature is enabled."""
        return feature in self._features

    def require(self, feature: Feature, *, op: str | None = None, path: str | None = None) -> None:
        """Raise if a feature is not enabled.

        :raises CapabilityNotSupported: If the feature is missing.
        """
        if feature not in self._features:
            raise CapabilityNotSupported(
                f"Feature '{feature.value}' is not enabled",
                capability=feature.value,
                op=op,
                path=path,
                backend="azfile",
            )

    def __contains__(self, feature: object) -> bool:
        return feature in self._features

    def __iter__(self) -> Iterator[Feature]:
        return iter(self._features)

    def __len__(self) -> int:
        return len(self._features)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FeatureSet):
            return self._features == other._features
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._features)

    def __repr__(self) -> str:
        names = sorted(f.name for f in self._features)
        return f"FeatureSet({{{', '.join(names)}}})"

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("FeatureSet is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("FeatureSet is immutable")
