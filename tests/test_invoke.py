"""
Method invocation (invoke.py).
"""

import logging

from reflectkit.access import with_accessible_member
from reflectkit.faults import InvocationDenied, InvocationFailed
from reflectkit.invoke import invoke, try_bind
from reflectkit.members import get_method


class Counter:
    created = []

    def __init__(self):
        self.total = 0

    def add(self, amount: int) -> int:
        self.total += amount
        return self.total

    def fail(self) -> None:
        raise ValueError("counter jammed")

    def _reset(self) -> None:
        self.total = 0

    def __drain(self) -> None:
        self.total = -1

    @staticmethod
    def make(label: str) -> None:
        Counter.created.append(label)

    @classmethod
    def make_many(cls, count: int) -> None:
        cls.created.extend(["many"] * count)


class TestInvoke:

    def test_invokes_for_effect(self):
        counter = Counter()
        outcome = invoke(get_method(Counter, "add"), counter, [5])
        assert outcome.ok
        assert outcome.value is None
        assert counter.total == 5

    def test_static_and_class_methods_ignore_target(self, monkeypatch):
        monkeypatch.setattr(Counter, "created", [])
        assert invoke(get_method(Counter, "make"), None, ("x",)).ok
        assert invoke(get_method(Counter, "make_many"), Counter(), (2,)).ok
        assert Counter.created == ["x", "many", "many"]

    def test_method_raised(self, caplog):
        with caplog.at_level(logging.ERROR, logger="reflectkit.invoke"):
            outcome = invoke(get_method(Counter, "fail"), Counter())
        assert isinstance(outcome.fault, InvocationFailed)
        assert isinstance(outcome.fault.__cause__, ValueError)
        assert "counter jammed" in outcome.fault.message
        assert "INVOCATION_FAILED" in caplog.text

    def test_arguments_do_not_bind(self):
        counter = Counter()
        outcome = invoke(get_method(Counter, "add"), counter, (1, 2))
        assert isinstance(outcome.fault, InvocationFailed)
        assert outcome.fault.metadata["reason"].startswith("arguments do not bind")
        assert counter.total == 0

    def test_try_bind(self):
        add = get_method(Counter, "add")
        assert try_bind(add, Counter(), (1,)) is None
        assert try_bind(add, Counter(), ()) is not None


class TestRestrictedInvoke:

    def test_private_method_denied(self):
        counter = Counter()
        outcome = invoke(get_method(Counter, "__drain"), counter)
        assert isinstance(outcome.fault, InvocationDenied)
        assert outcome.fault.metadata["reason"] == "restricted method"
        assert counter.total == 0

    def test_protected_method_for_subclass(self):
        class Tally(Counter):
            pass

        counter = Counter()
        counter.total = 4
        assert invoke(get_method(Counter, "_reset"), counter, accessor=Tally).ok
        assert counter.total == 0

    def test_private_method_with_grant(self):
        counter = Counter()
        drain = get_method(Counter, "__drain")
        outcome = with_accessible_member(drain, None, lambda m, g: invoke(m, counter, grant=g))
        assert outcome.ok
        assert counter.total == -1

    def test_revoked_grant(self):
        drain = get_method(Counter, "__drain")
        grant = with_accessible_member(drain, None, lambda m, g: g)
        outcome = invoke(drain, Counter(), grant=grant)
        assert outcome.fault.metadata["reason"] == "grant revoked"
