"""
Instance pipeline (pipeline.py).
"""

import pytest

from conftest import PLUGIN_BASE
from reflectkit.faults import ConstructionFailed, NoMatchingConstructor, PathNotFound
from reflectkit.pipeline import collect_instances, create_instances, for_each_instance


GOOD_SOURCE = """
    from ..base import Plugin

    class Good(Plugin):
        pass
"""

FAILING_SOURCE = """
    from ..base import Plugin

    class Failing(Plugin):
        def __init__(self, name: str):
            raise RuntimeError("cannot start " + name)
"""

NEEDY_SOURCE = """
    from ..base import Plugin

    class Needy(Plugin):
        def __init__(self, name: str, port: int):
            super().__init__(name)
            self.port = port
"""

AUDITED_SOURCE = """
    from ..base import Plugin

    started = []

    class Audited(Plugin):
        def __init__(self, name: str):
            super().__init__(name)
            started.append(name)
"""


@pytest.fixture
def plugins(packages):
    packages.write("", {"base.py": PLUGIN_BASE})
    return packages.write("plugins", {
        "__init__.py": "",
        "Good.py": GOOD_SOURCE,
        "Failing.py": FAILING_SOURCE,
        "Needy.py": NEEDY_SOURCE,
    })


# ============================================================================
# collect_instances
# ============================================================================

class TestCollectInstances:

    def test_only_constructible_candidates(self, packages, plugins):
        plugin = packages.load("base:Plugin")
        good = packages.load("plugins.Good:Good")
        instances = collect_instances(plugins, plugin, ["alpha"], source_root=packages.root)
        assert instances == {good("alpha")}

    def test_no_candidates_gives_empty_set(self, packages, plugins):
        unrelated = packages.write("empty", {"__init__.py": ""})
        plugin = packages.load("base:Plugin")
        assert collect_instances(unrelated, plugin, ["alpha"], source_root=packages.root) == set()

    def test_setup_fault_propagates(self, packages):
        with pytest.raises(PathNotFound):
            collect_instances(f"{packages.top}.absent", object, source_root=packages.root)


# ============================================================================
# for_each_instance
# ============================================================================

class TestForEachInstance:

    def test_report_distinguishes_failures(self, packages, plugins):
        plugin = packages.load("base:Plugin")
        consumed = []
        report = for_each_instance(plugins, plugin, ("alpha",), consumed.append, source_root=packages.root)

        assert [type(i).__name__ for i in consumed] == ["Good"]
        assert len(report.outcomes) == 3
        assert [o.subject.__name__ for o in report.succeeded] == ["Good"]

        faults = {o.subject.__name__: o.fault for o in report.failed}
        assert isinstance(faults["Failing"], ConstructionFailed)
        assert isinstance(faults["Needy"], NoMatchingConstructor)
        assert not report.complete

    def test_arguments_are_matched_per_candidate(self, packages, plugins):
        plugin = packages.load("base:Plugin")
        report = for_each_instance(plugins, plugin, ("alpha", 8080), lambda i: None, source_root=packages.root)
        assert [type(i).__name__ for i in report.instances] == ["Needy"]
        assert report.instances[0].port == 8080

    def test_unresolvable_entry_in_report(self, packages, plugins):
        packages.write("plugins", {"Zbroken.py": "import does_not_exist_anywhere\n"})
        plugin = packages.load("base:Plugin")
        report = for_each_instance(plugins, plugin, ("alpha",), lambda i: None, source_root=packages.root)
        assert [f.code for f in report.scan.faults] == ["TYPE_RESOLUTION_FAILED"]
        assert len(report.succeeded) == 1

    def test_consumer_exceptions_propagate(self, packages, plugins):
        plugin = packages.load("base:Plugin")

        def consumer(instance):
            raise KeyError("consumer broke")

        with pytest.raises(KeyError):
            for_each_instance(plugins, plugin, ("alpha",), consumer, source_root=packages.root)


# ============================================================================
# create_instances
# ============================================================================

class TestCreateInstances:

    def test_construction_side_effects(self, packages):
        packages.write("", {"base.py": PLUGIN_BASE})
        namespace = packages.write("audited", {"__init__.py": "", "Audited.py": AUDITED_SOURCE})
        plugin = packages.load("base:Plugin")

        report = create_instances(namespace, plugin, ["beta"], source_root=packages.root)

        assert packages.load("audited.Audited:started") == ["beta"]
        assert report.complete


# ============================================================================
# Builtin bases
# ============================================================================

ERRORS_SOURCE = """
    class Good(Exception):
        pass

    class Picky(Exception):
        def __init__(self, code: int):
            super().__init__(code)
"""


class TestBuiltinBases:

    def test_exception_subclasses_do_not_abort_the_pipeline(self, packages):
        namespace = packages.write("errors", {"__init__.py": "", "kinds.py": ERRORS_SOURCE})

        report = for_each_instance(namespace, Exception, (), lambda i: None, source_root=packages.root)

        assert [type(i).__name__ for i in report.instances] == ["Good"]
        (failed,) = report.failed
        assert failed.subject.__name__ == "Picky"
        assert isinstance(failed.fault, NoMatchingConstructor)

    def test_collect_exception_subclasses(self, packages):
        namespace = packages.write("errors", {"__init__.py": "", "kinds.py": ERRORS_SOURCE})
        instances = collect_instances(namespace, Exception, (), source_root=packages.root)
        assert [type(i).__name__ for i in instances] == ["Good"]
