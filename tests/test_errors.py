"""Tests for the error hierarchy."""

from __future__ import annotations

import pytest

from azfile_store._errors import (
    CapabilityNotSupported,
    InitError,
    InvalidPair,
    ListModeInvalid,
    NotFound,
    PairRequired,
    PairUnsupported,
    PermissionDenied,
    StoreError,
    Unexpected,
    Unsupported,
)


class TestBaseError:
    def test_default_attributes(self) -> None:
        e = StoreError("boom")
        assert e.op is None
        assert e.path is None
        assert e.backend is None

    def test_with_attributes(self) -> None:
        e = StoreError("boom", op="stat", path="a/b.txt", backend="azfile")
        assert e.op == "stat"
        assert e.path == "a/b.txt"
        assert e.backend == "azfile"

    def test_str_plain(self) -> None:
        assert str(StoreError("boom")) == "boom"

    def test_str_with_context(self) -> None:
        e = StoreError("boom", op="read", path="x.txt", backend="azfile")
        assert str(e) == "boom | op='read' | path='x.txt' | backend='azfile'"

    def test_repr(self) -> None:
        e = NotFound("missing", op="stat", path="x.txt")
        assert repr(e) == "NotFound('missing', op='stat', path='x.txt')"


class TestHierarchy:
    @pytest.mark.parametrize(
        "cls",
        [NotFound, PermissionDenied, Unexpected, Unsupported, PairRequired, InvalidPair, InitError],
    )
    def test_is_store_error(self, cls: type[StoreError]) -> None:
        assert issubclass(cls, StoreError)

    @pytest.mark.parametrize("cls", [CapabilityNotSupported, PairUnsupported, ListModeInvalid])
    def test_is_unsupported(self, cls: type[StoreError]) -> None:
        assert issubclass(cls, Unsupported)

    def test_catch_all(self) -> None:
        with pytest.raises(StoreError):
            raise NotFound("gone")


class TestCapabilityNotSupported:
    def test_capability(self) -> None:
        e = CapabilityNotSupported("no", capability="virtual_dir", op="stat")
        assert e.capability == "virtual_dir"
        assert e.op == "stat"
        assert "capability='virtual_dir'" in str(e)
        assert "capability='virtual_dir'" in repr(e)

    def test_without_capability(self) -> None:
        assert str(CapabilityNotSupported("no")) == "no"


class TestPairErrors:
    def test_pair_unsupported_default_message(self) -> None:
        e = PairUnsupported(pair="offset", value=3, op="stat")
        assert e.pair == "offset"
        assert e.value == 3
        assert "Option 'offset' is not supported" in str(e)
        assert "pair='offset'" in str(e)

    def test_pair_required(self) -> None:
        e = PairRequired(pair="endpoint")
        assert e.pair == "endpoint"
        assert "required" in str(e)

    def test_invalid_pair(self) -> None:
        e = InvalidPair(pair="offset", value=-1)
        assert e.value == -1
        assert "-1" in str(e)

    def test_list_mode_invalid(self) -> None:
        e = ListModeInvalid(actual="sideways", op="list")
        assert e.actual == "sideways"
        assert "sideways" in str(e)


class TestInitError:
    def test_wraps_step_error(self) -> None:
        inner = PairRequired(pair="endpoint")
        e = InitError(err=inner, op="new_storager", pairs={"name": "share"})
        assert e.err is inner
        assert e.op == "new_storager"
        assert e.pairs == {"name": "share"}
        assert "endpoint" in str(e)
        assert "pairs={'name': 'share'}" in str(e)

    def test_defaults(self) -> None:
        assert InitError().pairs == {}
