from __future__ import annotations

from pathlib import Path

import pytest

from distship.core.result import Err, Ok
from distship.release.model import PackageRecord, RegistryTagSet
from distship.release.reconcile import check_versions, merge_versions


def _record(name: str, version: str) -> PackageRecord:
    return PackageRecord(
        path=Path("packages") / name,
        name=name,
        version=version,
        manifest={"name": name, "version": version},
    )


def _tags(name: str, **tags: str) -> RegistryTagSet:
    return RegistryTagSet(name=name, tags=tags)


def test_merge_overlays_registry_tags_on_local_records() -> None:
    state = merge_versions(
        [_record("a", "1.2.0"), _record("b", "1.0.0")],
        [_tags("a", next="1.2.0", latest="1.1.0")],
    )

    assert list(state) == ["a", "b"]
    assert state["a"].version == "1.2.0"
    assert state["a"].next == "1.2.0"
    assert state["a"].latest == "1.1.0"
    assert dict(state["b"].tags) == {}


def test_merge_ignores_registry_only_names() -> None:
    state = merge_versions([_record("a", "1.0.0")], [_tags("ghost", next="9.9.9")])
    assert list(state) == ["a"]


def test_merged_tags_are_read_only() -> None:
    state = merge_versions([_record("a", "1.0.0")], [_tags("a", next="1.0.0")])
    with pytest.raises(TypeError):
        state["a"].tags["next"] = "2.0.0"  # type: ignore[index]


def test_check_passes_when_next_matches_and_something_changed() -> None:
    state = merge_versions(
        [_record("a", "1.2.0"), _record("b", "1.0.0")],
        [
            _tags("a", next="1.2.0", latest="1.1.0"),
            _tags("b", next="1.0.0", latest="1.0.0"),
        ],
    )

    result = check_versions(state)

    assert isinstance(result, Ok)
    assert [str(d) for d in result.value] == ["a@1.1.0 => a@1.2.0"]


def test_check_fails_on_next_drift_and_names_package() -> None:
    state = merge_versions(
        [_record("a", "1.2.0"), _record("b", "1.3.0")],
        [
            _tags("a", next="1.2.0", latest="1.1.0"),
            _tags("b", next="1.2.0", latest="1.1.0"),
        ],
    )

    result = check_versions(state)

    assert isinstance(result, Err)
    assert result.error.packages == ("b",)
    assert "next version of b (1.2.0)" in result.error.message
    assert "local repo version (1.3.0)" in result.error.message


def test_check_treats_unpublished_package_as_drift() -> None:
    state = merge_versions([_record("new", "0.1.0")], [])

    result = check_versions(state)

    assert isinstance(result, Err)
    assert result.error.packages == ("new",)


def test_check_fails_when_nothing_changed() -> None:
    state = merge_versions(
        [_record("a", "1.2.0"), _record("b", "2.0.0")],
        [
            _tags("a", next="1.2.0", latest="1.2.0"),
            _tags("b", next="2.0.0", latest="2.0.0"),
        ],
    )

    result = check_versions(state)

    assert isinstance(result, Err)
    assert result.error.message == "No packages have been modified, there is nothing to release."


def test_check_counts_missing_latest_as_a_change() -> None:
    state = merge_versions([_record("a", "1.0.0")], [_tags("a", next="1.0.0")])

    result = check_versions(state)

    assert isinstance(result, Ok)
    assert str(result.value[0]) == "a@None => a@1.0.0"
