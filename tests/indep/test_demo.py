"""Tests for the sample deployment."""

import logging

from indep.component import bindings
from indep.config import IndepConfig, RebindPolicy
from indep.demo import Impl1, Trait1, build_demo_pool, load_demo, run_lifecycle

deployment = load_demo().deployment


def _labels(pool):
    result = {}
    for entry in pool:
        with entry.provider.as_base().borrow() as instance:
            result[entry.provider.identity()] = {
                slot: handle.label if handle is not None else None
                for slot, handle in bindings(instance).items()
            }
    return result


class TestDemoDeployment:
    """Tests for the packaged demo.yaml."""

    def test_schema(self):
        """Test the demo schema."""
        assert deployment.schema.base == "Base"
        assert deployment.schema.kind_names == ("Trait1", "Trait2", "Trait3")

    def test_interfaces_resolve_to_kinds(self):
        """Test the interface classes name their capability kinds."""
        assert deployment.schema.resolve(Trait1) is deployment.schema.Kind.Trait1

    def test_components_declared(self):
        """Test every demo component is declared."""
        assert list(deployment.components) == ["Impl1", "Impl2", "Impl3"]
        assert deployment.declaration("Impl3").slot_names == ("t1_1", "t2_1", "t2_2")


class TestTaggedDemo:
    """Tests for the default layout (Impl1 tagged t1_1)."""

    def test_summary(self):
        """Test the pool summary."""
        pool = build_demo_pool()
        assert pool.summary() == (
            "Impl1 as t1_1 (Trait1, Trait2) / Impl2 (Trait2) / Impl3 (Trait3)"
        )

    def test_bindings(self):
        """Test Impl1 only reaches t1_1, Impl2 fills both Trait2 slots."""
        labels = _labels(build_demo_pool())
        assert labels["Impl1"] == {}
        assert labels["Impl2"] == {"t1": None}
        assert labels["Impl3"] == {"t1_1": "Impl1", "t2_1": "Impl2", "t2_2": "Impl2"}

    def test_lifecycle_reports_missing_dependency(self):
        """Test components needing the unbound slot report it."""
        results = run_lifecycle(build_demo_pool())
        assert results["Impl1"] == "foo from Impl1"
        assert results["Impl2"] == "missing dependency: Impl2.t1 is not bound"
        assert results["Impl3"] == "missing dependency: Impl2.t1 is not bound"


class TestBroadcastDemo:
    """Tests for the layout with every provider untagged."""

    def test_bindings(self):
        """Test Impl2's Trait2 overwrites Impl1's in Impl3 (last write wins)."""
        labels = _labels(build_demo_pool(tag_impl1=False))
        assert labels["Impl2"] == {"t1": "Impl1"}
        assert labels["Impl3"] == {"t1_1": "Impl1", "t2_1": "Impl2", "t2_2": "Impl2"}

    def test_lifecycle(self):
        """Test every component starts when fully wired."""
        results = run_lifecycle(build_demo_pool(tag_impl1=False))
        assert results == {
            "Impl1": "foo from Impl1",
            "Impl2": "boo from Impl2, foo from Impl1",
            "Impl3": "oo from Impl3: 1: Impl2 says 'Trait2' 2: Impl2 says 'Trait2' (foo from Impl1)",
        }

    def test_components_usable_directly(self):
        """Test bound demo classes work as plain classes too."""
        components = load_demo().components
        assert components["Impl1"]().do2() == "Impl1 says 'Trait2'"
        assert components["Impl2"]().t1 is None
        assert components["Impl3"]().t1_1 is None


class TestLoadDemo:
    """Tests for loading the demo under a configuration."""

    def test_bound_classes_extend_bodies(self):
        """Test each bound class is a fresh subclass of its plain body."""
        components = load_demo().components
        assert issubclass(components["Impl1"], Impl1)
        assert components["Impl1"] is not Impl1
        assert not hasattr(Impl1, "accept")

    def test_config_reaches_schema(self):
        """Test the demo schema uses the given configuration."""
        demo = load_demo(IndepConfig.strict())
        assert demo.deployment.schema.config.rebind_policy is RebindPolicy.WARN

    def test_loads_are_independent(self):
        """Test two loads do not share component classes."""
        assert load_demo().components["Impl2"] is not load_demo().components["Impl2"]

    def test_warn_policy_logs_broadcast_rebinds(self, caplog):
        """Test Impl3's Trait2 slots are reported when Impl2 overwrites Impl1."""
        with caplog.at_level(logging.WARNING, logger="indep.component"):
            build_demo_pool(tag_impl1=False, config=IndepConfig.strict())
        assert "Impl3.t2_1 rebound from Impl1 to Impl2" in caplog.text
        assert "Impl3.t2_2 rebound from Impl1 to Impl2" in caplog.text

    def test_default_policy_is_silent(self, caplog):
        """Test the default configuration overwrites without warnings."""
        with caplog.at_level(logging.WARNING, logger="indep.component"):
            build_demo_pool(tag_impl1=False)
        assert "rebound" not in caplog.text
