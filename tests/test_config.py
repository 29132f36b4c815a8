"""Tests for TrackingConfig and parse_tracking_config."""

import logging
from collections import OrderedDict
from types import SimpleNamespace

import pytest

from mutrack import (
    MUTATION_METHODS,
    MutationWrapper,
    TrackingConfig,
    TrackingConfigError,
    has_mutated,
    is_tracked_view,
    parse_tracking_config,
    wrap,
)


class Ledger:
    def __init__(self) -> None:
        self.entries: list[int] = []

    def record(self, amount: int) -> None:
        self.entries.append(amount)


class TestTrackingConfig:
    """TrackingConfig construction and effects."""

    def test_defaults(self) -> None:
        """Default config uses the built-in mutating method set."""
        config = TrackingConfig()
        assert config.mutating_methods == MUTATION_METHODS
        assert config.atomic_types == ()
        assert config.trace is False

    def test_kind_agnostic_names_present(self) -> None:
        """The kind-agnostic method names are all in the default set."""
        for name in ("set", "add", "delete", "clear", "push", "pop", "shift", "unshift"):
            assert name in MUTATION_METHODS
        for name in ("splice", "sort", "reverse", "fill", "copyWithin"):
            assert name in MUTATION_METHODS

    def test_collections_are_normalised(self) -> None:
        """Sets and lists are stored as frozenset and tuple."""
        config = TrackingConfig(mutating_methods={"record"}, atomic_types=[OrderedDict])
        assert config.mutating_methods == frozenset({"record"})
        assert config.atomic_types == (OrderedDict,)

    @pytest.mark.parametrize(
        ("kwargs", "field"),
        [
            ({"mutating_methods": {"not a name"}}, "mutating_methods"),
            ({"mutating_methods": {1}}, "mutating_methods"),
            ({"atomic_types": ("OrderedDict",)}, "atomic_types"),
        ],
    )
    def test_invalid_values(self, kwargs: dict, field: str) -> None:
        """Invalid fields raise TrackingConfigError naming the field."""
        with pytest.raises(TrackingConfigError) as exc_info:
            TrackingConfig(**kwargs)
        assert exc_info.value.field == field
        assert str(exc_info.value).startswith(f"{field}: ")

    def test_custom_mutating_method(self) -> None:
        """Extra method names are treated as mutating."""
        config = TrackingConfig(mutating_methods=MUTATION_METHODS | {"record"})
        view = wrap(Ledger(), config)

        view.record(5)

        assert has_mutated(view) is True

    def test_default_ignores_custom_method(self) -> None:
        """Without configuration, unknown method names are not observed."""
        view = wrap(Ledger())
        view.record(5)
        assert has_mutated(view) is False

    def test_atomic_types(self) -> None:
        """Configured atomic types are never wrapped."""
        config = TrackingConfig(atomic_types=(OrderedDict,))
        ordered = OrderedDict(a=1)

        assert wrap(ordered, config) is ordered
        view = wrap({"o": ordered}, config)
        assert view["o"] is ordered

    def test_wrapper_exposes_config(self) -> None:
        """MutationWrapper keeps the config it was built with."""
        config = TrackingConfig(trace=True)
        assert MutationWrapper(config).config is config
        assert MutationWrapper().config == TrackingConfig()


class TestParseTrackingConfig:
    """parse_tracking_config() from plain mappings."""

    def test_empty_mapping(self) -> None:
        """An empty mapping gives the defaults."""
        assert parse_tracking_config({}) == TrackingConfig()

    def test_extend_and_exclude(self) -> None:
        """Method names can be added and removed."""
        config = parse_tracking_config({"mutatingMethods": {"extend": ["record"], "exclude": ["sort"]}})

        assert "record" in config.mutating_methods
        assert "sort" not in config.mutating_methods
        assert "append" in config.mutating_methods

        view = wrap([3, 1, 2], config)
        view.sort()
        assert has_mutated(view) is False

    def test_atomic_types(self) -> None:
        """Atomic types are imported from 'module:QualName' paths."""
        config = parse_tracking_config({"atomicTypes": ["collections:OrderedDict", "types:SimpleNamespace"]})

        assert config.atomic_types == (OrderedDict, SimpleNamespace)
        assert is_tracked_view(wrap(SimpleNamespace(), config)) is False

    def test_trace(self) -> None:
        """trace is read as a boolean."""
        assert parse_tracking_config({"trace": True}).trace is True

    @pytest.mark.parametrize(
        ("raw", "field"),
        [
            ({"atomicTypes": ["collections.OrderedDict"]}, "atomicTypes"),
            ({"atomicTypes": ["no_such_module_xyz:Thing"]}, "atomicTypes"),
            ({"atomicTypes": ["collections:NoSuchThing"]}, "atomicTypes"),
            ({"atomicTypes": ["json:dumps"]}, "atomicTypes"),
            ({"atomicTypes": "collections:OrderedDict"}, "atomicTypes"),
            ({"mutatingMethods": {"extend": "record"}}, "mutatingMethods"),
            ({"mutatingMethods": {"extend": ["not valid"]}}, "mutating_methods"),
            ({"trace": "yes"}, "trace"),
        ],
    )
    def test_invalid(self, raw: dict, field: str) -> None:
        """Malformed mappings raise TrackingConfigError naming the offending key."""
        with pytest.raises(TrackingConfigError) as exc_info:
            parse_tracking_config(raw)
        assert exc_info.value.field == field


class TestTracing:
    """Debug records emitted while tracking."""

    def test_trace_records_reads(self, caplog: pytest.LogCaptureFixture) -> None:
        """With trace enabled every intercepted read is logged."""
        view = wrap([[1]], TrackingConfig(trace=True))

        with caplog.at_level(logging.DEBUG, logger="mutrack"):
            _ = view[0]
            _ = view.count

        messages = [r.getMessage() for r in caplog.records]
        assert "read [0] on list" in messages
        assert "read .count on list" in messages

    def test_no_trace_by_default(self, caplog: pytest.LogCaptureFixture) -> None:
        """Reads are silent without trace."""
        view = wrap([[1]])

        with caplog.at_level(logging.DEBUG, logger="mutrack"):
            _ = view[0]

        assert not [r for r in caplog.records if r.getMessage().startswith("read ")]

    def test_lifecycle_events(self, caplog: pytest.LogCaptureFixture) -> None:
        """Root creation and the first mutation are logged once."""
        with caplog.at_level(logging.DEBUG, logger="mutrack"):
            view = wrap([])
            view.append(1)
            view.append(2)

        events = [getattr(r, "event", None) for r in caplog.records]
        assert events.count("view_created") == 1
        assert events.count("mutation_observed") == 1
        observed = next(r for r in caplog.records if getattr(r, "event", None) == "mutation_observed")
        assert observed.operation == "append()"
