"""
Instance pipeline: scan a package, construct every candidate, hand each
instance to a consumer.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Set, Type, TypeVar

from .instantiate import try_construct
from .results import PipelineReport, ScanReport
from .scanner import scan_package

logger = logging.getLogger("reflectkit.pipeline")

T = TypeVar("T")


def for_each_instance(
    namespace: str,
    base_type: Type[T],
    args: Iterable[Any],
    consumer: Callable[[T], Any],
    *,
    accessor: Any = None,
    **scan_options: Any,
) -> PipelineReport:
    """
    Construct every subclass of ``base_type`` in ``namespace`` and pass each
    instance to ``consumer``.

    A candidate that fails to construct is skipped; its outcome is kept in
    the returned report. Scan setup faults propagate.
    """
    args = tuple(args)
    report = PipelineReport(scan=ScanReport(namespace=namespace))

    for cls in scan_package(namespace, base_type, report=report.scan, **scan_options):
        outcome = try_construct(cls, args, accessor=accessor)
        report.outcomes.append(outcome)
        if outcome.ok:
            consumer(outcome.value)

    logger.debug(
        f"{namespace}: {len(report.succeeded)} constructed, "
        f"{len(report.failed)} failed, {len(report.scan.faults)} unresolved"
    )
    return report


def collect_instances(
    namespace: str,
    base_type: Type[T],
    args: Iterable[Any] = (),
    **options: Any,
) -> Set[T]:
    """Instances of every constructible candidate, as a set."""
    instances: Set[T] = set()
    for_each_instance(namespace, base_type, args, instances.add, **options)
    return instances


def create_instances(
    namespace: str,
    base_type: Type[T],
    args: Iterable[Any] = (),
    **options: Any,
) -> PipelineReport:
    """Construct every candidate for the side effects of construction."""
    return for_each_instance(namespace, base_type, args, lambda instance: None, **options)
