"""Tests for repository decorators."""

import itertools

import pytest

from update_center.errors import ConfigurationError
from update_center.predicates import AllOf, JavaCompatible, RequiredCoreAtMost
from update_center.sources import IndexRepository
from update_center.versions import VersionNumber
from update_center.wrappers import (
    ExperimentalOnly,
    NoExperimental,
    PredicateFiltered,
    StableCoreOnly,
    Truncated,
    VersionCapped,
)


def make_repository(plugins, core=(), java=None, required_core=None):
    """Index repository with one release per day, in the order given."""
    days = itertools.count(1)

    def record(version, name):
        data = {
            "version": version,
            "group": "org.example",
            "url": f"https://repo.example/{name}/{version}",
            "sha256": "abc",
            "timestamp": f"2024-01-{next(days) % 28 + 1:02d}T00:00:00Z",
            "requiredCore": (required_core or {}).get((name, version), "1.0"),
        }
        if java and (name, version) in java:
            data["minimumJavaVersion"] = java[(name, version)]
        return data

    document = {
        "core": [record(v, "core") for v in core],
        "plugins": {
            name: [record(v, name) for v in versions]
            for name, versions in plugins.items()
        },
    }
    return IndexRepository(document, on_error=lambda e: None)


def versions_of(repo):
    return {
        e.name: [str(a.version) for a in e.artifacts]
        for e in repo.list_plugin_entries()
    }


def core_of(repo):
    return [str(v) for v in repo.list_core_releases()]


PLUGINS = {
    "alpha": ["1.0", "1.1-beta", "2.0"],
    "beta": ["0.9-alpha-1", "0.9-beta"],
    "gamma": ["3.0", "3.1"],
    "delta": ["1.5", "1.6-rc-1"],
}


@pytest.mark.parametrize("count", [0, 1, 2, 4, 10])
def test_truncation_takes_prefix(count):
    base = make_repository(PLUGINS)
    names = [e.name for e in base.list_plugin_entries()]

    truncated = Truncated(base, count)

    assert [e.name for e in truncated.list_plugin_entries()] == names[:count]
    assert len(truncated.list_plugin_entries()) == min(count, len(names))


def test_truncation_passes_core_and_history_through():
    base = make_repository(PLUGINS, core=["1.600.1", "1.601"])

    truncated = Truncated(base, 1)

    assert truncated.list_core_releases() == base.list_core_releases()
    assert truncated.list_releases_by_date() == base.list_releases_by_date()


def test_truncation_rejects_negative_count():
    with pytest.raises(ConfigurationError):
        Truncated(make_repository(PLUGINS), -1)


def test_experimental_split_partitions_versions():
    base = make_repository(PLUGINS)

    experimental = versions_of(ExperimentalOnly(base))
    stable = versions_of(NoExperimental(base))

    for name, versions in versions_of(base).items():
        kept = experimental.get(name, []) + stable.get(name, [])
        assert sorted(kept) == sorted(versions)
        assert not set(experimental.get(name, [])) & set(stable.get(name, []))


def test_experimental_split_drops_empty_entries():
    base = make_repository(PLUGINS)

    assert "gamma" not in versions_of(ExperimentalOnly(base))
    assert "beta" not in versions_of(NoExperimental(base))
    assert versions_of(ExperimentalOnly(base))["alpha"] == ["1.1-beta"]


def test_experimental_split_leaves_core_alone():
    base = make_repository(PLUGINS, core=["2.0-rc-1", "2.0"])

    assert core_of(ExperimentalOnly(base)) == ["2.0", "2.0-rc-1"]


def test_stable_core_keeps_three_component_versions():
    base = make_repository(PLUGINS, core=["1.600.1", "1.601", "2.0.1"])

    stable = StableCoreOnly(base)

    assert core_of(stable) == ["2.0.1", "1.600.1"]
    dropped = set(base.list_core_releases()) - set(stable.list_core_releases())
    assert all(v.component_count != 3 for v in dropped)
    assert versions_of(stable) == versions_of(base)


def test_version_cap_scenario():
    base = make_repository({"foo": ["1.0", "1.1-beta", "2.0"]})

    capped = VersionCapped(base, plugin_cap="1.5")
    entry = capped.list_plugin_entries()[0]

    assert [str(a.version) for a in entry.artifacts] == ["1.1-beta", "1.0"]
    assert str(entry.latest.version) == "1.1-beta"

    stable = NoExperimental(capped).list_plugin_entries()[0]
    assert [str(a.version) for a in stable.artifacts] == ["1.0"]
    assert str(stable.latest.version) == "1.0"


def test_version_cap_removes_entries_above_cap():
    base = make_repository(PLUGINS)
    cap = VersionNumber("1.5")

    capped = versions_of(VersionCapped(base, plugin_cap=cap))

    for name, versions in versions_of(base).items():
        if all(VersionNumber(v) > cap for v in versions):
            assert name not in capped
        else:
            assert all(VersionNumber(v) <= cap for v in capped[name])
    assert "gamma" not in capped
    assert capped["delta"] == ["1.5"]


def test_core_cap_defaults_to_plugin_cap():
    base = make_repository(PLUGINS, core=["1.600.1", "1.601", "2.0.1"])

    assert core_of(VersionCapped(base, plugin_cap="1.601")) == ["1.601", "1.600.1"]
    assert core_of(VersionCapped(base, plugin_cap="1.5", core_cap="2.0")) == ["1.601", "1.600.1"]
    assert core_of(VersionCapped(base, core_cap="1.600.5")) == ["1.600.1"]
    assert versions_of(VersionCapped(base, core_cap="1.0")) == versions_of(base)


def test_version_cap_is_idempotent():
    base = make_repository(PLUGINS, core=["1.600.1", "1.601", "2.0.1"])

    once = VersionCapped(base, "1.5", "1.601")
    twice = VersionCapped(once, "1.5", "1.601")

    assert twice.list_plugin_entries() == once.list_plugin_entries()
    assert twice.list_core_releases() == once.list_core_releases()
    assert twice.list_releases_by_date() == once.list_releases_by_date()


def test_capped_history_only_lists_kept_releases():
    base = make_repository({"foo": ["1.0", "2.0"]})

    history = VersionCapped(base, plugin_cap="1.0").list_releases_by_date()

    assert [str(a.version) for bucket in history for a in bucket.releases] == ["1.0"]


def test_filters_keep_history_of_truncated_base():
    base = make_repository(PLUGINS)
    truncated = Truncated(base, 1)

    capped = VersionCapped(truncated, "999")
    filtered = PredicateFiltered(truncated, lambda artifact: True)

    assert capped.list_releases_by_date() == truncated.list_releases_by_date()
    assert filtered.list_releases_by_date() == truncated.list_releases_by_date()


def test_experimental_split_drops_emptied_history_days():
    base = make_repository({"foo": ["1.0", "1.1-beta"]})

    stable = NoExperimental(base).list_releases_by_date()
    experimental = ExperimentalOnly(base).list_releases_by_date()

    assert [[str(a.version) for a in b.releases] for b in stable] == [["1.0"]]
    assert [[str(a.version) for a in b.releases] for b in experimental] == [["1.1-beta"]]


def test_predicate_filters_compose_with_and():
    base = make_repository(
        {"foo": ["1.0", "2.0", "3.0"], "bar": ["1.0"]},
        java={("foo", "2.0"): "11", ("foo", "3.0"): "17", ("bar", "1.0"): "17"},
        required_core={("foo", "3.0"): "2.400"},
    )

    java11 = PredicateFiltered(base, JavaCompatible("11"))
    assert versions_of(java11) == {"foo": ["2.0", "1.0"]}

    chained = PredicateFiltered(java11, RequiredCoreAtMost("2.300"))
    combined = PredicateFiltered(base, JavaCompatible("17"), RequiredCoreAtMost("2.300"))
    assert versions_of(combined) == {"bar": ["1.0"], "foo": ["2.0", "1.0"]}
    assert versions_of(chained) == {"foo": ["2.0", "1.0"]}


def test_predicate_filter_accepts_callables():
    base = make_repository(PLUGINS)

    filtered = PredicateFiltered(base, lambda a: a.name != "alpha", AllOf())

    assert "alpha" not in versions_of(filtered)
    assert len(versions_of(filtered)) == 3


def test_decorators_do_not_modify_base():
    base = make_repository(PLUGINS, core=["1.600.1", "1.601"])
    before = (versions_of(base), core_of(base))

    VersionCapped(StableCoreOnly(NoExperimental(base)), "1.0").list_plugin_entries()
    VersionCapped(StableCoreOnly(NoExperimental(base)), "1.0").list_core_releases()

    assert (versions_of(base), core_of(base)) == before
