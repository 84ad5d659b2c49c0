"""rk CLI - Main Entry Point.

Commands:
    scan     - List the subclasses of a base type found in a package
    members  - List the declared members of a class with their modifiers
"""

import importlib
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from . import __version__, __cli_name__
from .utils.colors import (
    badge, bold, dim, error, info, kv, section, success, warning,
    _CROSS,
)


def _load_object(path: str):
    """Resolve ``module:Qualified.Name`` to an object."""
    module_name, _, attr = path.partition(":")
    if not module_name or not attr:
        raise click.BadParameter(f"expected 'module:Name', got {path!r}")
    obj = importlib.import_module(module_name)
    for part in attr.split("."):
        obj = getattr(obj, part)
    return obj


@click.group()
@click.version_option(version=__version__, prog_name=__cli_name__)
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
@click.option('--quiet', '-q', is_flag=True, help='Minimal output')
@click.pass_context
def cli(ctx, verbose: bool, quiet: bool):
    """Runtime introspection: scan packages, construct types, inspect members."""
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    ctx.obj['quiet'] = quiet

    level = logging.DEBUG if verbose else logging.ERROR if quiet else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


# ============================================================================
# Scan
# ============================================================================

@cli.command('scan')
@click.argument('namespace')
@click.option('--base', 'base_path', required=True, help="Base type as 'module:Class'")
@click.option('--root', type=click.Path(file_okay=False), default=None, help='Source root directory')
@click.option('--suffix', default=None, help="Source file suffix (default '.py')")
@click.option('--instantiate', is_flag=True, help='Construct each type with no arguments')
@click.pass_context
def scan(ctx, namespace: str, base_path: str, root: Optional[str], suffix: Optional[str], instantiate: bool):
    """
    List the subclasses of a base type found in NAMESPACE.

    Examples:
      rk scan app.plugins --base app.plugins.base:Plugin --root src
      rk scan app.plugins --base app.plugins.base:Plugin --instantiate
    """
    from ..config import get_default_config
    from ..faults import Fault
    from ..pipeline import for_each_instance
    from ..results import ScanReport
    from ..scanner import scan_package

    source_root = Path(root) if root else get_default_config().root_path
    # Left on sys.path for the rest of the process so scanned modules stay importable
    if str(source_root.resolve()) not in sys.path:
        sys.path.insert(0, str(source_root.resolve()))

    try:
        base_type = _load_object(base_path)
    except (ImportError, AttributeError) as e:
        error(f"  {_CROSS} Cannot load base type {base_path}: {e}")
        sys.exit(1)

    if not isinstance(base_type, type):
        error(f"  {_CROSS} {base_path} is not a class")
        sys.exit(1)

    try:
        if instantiate:
            pipeline = for_each_instance(
                namespace, base_type, (), lambda instance: None,
                source_root=source_root, suffix=suffix,
            )
            report, outcomes = pipeline.scan, pipeline.outcomes
        else:
            report = ScanReport(namespace=namespace)
            list(scan_package(namespace, base_type, source_root=source_root, suffix=suffix, report=report))
            outcomes = []
    except Fault as e:
        error(f"  {_CROSS} {e}")
        sys.exit(1)

    section(f"Scan {namespace}")
    kv("Source root", str(source_root))
    kv("Base type", base_path)
    kv("Found", str(len(report.found)))
    click.echo()

    for cls in report.found:
        click.echo(f"  {badge('type')} {cls.__module__}.{cls.__qualname__}")

    for outcome in outcomes:
        if outcome.ok:
            success(f"  {badge('built')} {outcome.subject.__qualname__}")
        else:
            warning(f"  {badge('failed', style='fail')} {outcome.fault}")

    for fault in report.faults:
        warning(f"  {badge('unresolved', style='fail')} {fault}")

    if ctx.obj['verbose']:
        for name in report.skipped:
            dim(f"  {badge('skipped', style='skip')} {name}")


# ============================================================================
# Members
# ============================================================================

@cli.command('members')
@click.argument('target')
@click.option('--kind', type=click.Choice(['all', 'field', 'method', 'constructor']), default='all')
def members(target: str, kind: str):
    """
    List the members declared by TARGET ('module:Class').

    Examples:
      rk members app.plugins.csv:CsvExporter
      rk members app.plugins.csv:CsvExporter --kind field
    """
    from ..members import get_constructors, get_fields, get_methods
    from ..modifiers import modifier_string

    try:
        cls = _load_object(target)
    except (ImportError, AttributeError) as e:
        error(f"  {_CROSS} Cannot load {target}: {e}")
        sys.exit(1)

    if not isinstance(cls, type):
        error(f"  {_CROSS} {target} is not a class")
        sys.exit(1)

    groups = {
        'field': get_fields,
        'method': get_methods,
        'constructor': get_constructors,
    }
    for group, getter in groups.items():
        if kind not in ('all', group):
            continue
        section(f"{group.capitalize()}s")
        found = getter(cls)
        if not found:
            dim("  (none)")
        for member in found:
            params = ", ".join(getattr(t, "__name__", str(t)) for t in member.parameter_types)
            signature = f"({params})" if group != 'field' else ""
            info(f"  {modifier_string(member):<24} {bold(member.name)}{signature}")
        click.echo()


def main():
    """Entry point for `rk` command."""
    cli(obj={})


if __name__ == '__main__':
    main()
