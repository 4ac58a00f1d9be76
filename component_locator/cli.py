# component_locator/cli.py
from __future__ import annotations

"""Command-line interface
------------------------
Inspect settings, validate descriptor registries, and try a lookup against a
saved HTML snapshot without starting a browser.
"""

import json
import re
import sys
from pathlib import Path
from typing import List, Optional

import click

from component_locator.core.chainable import ComponentLocator
from component_locator.core.descriptor import load_descriptors_file
from component_locator.core.errors import ComponentLocatorError
from component_locator.dom.soup import SoupDom
from component_locator.utils.config import get_settings
from component_locator.utils.logger import set_log_level


# -------- helpers --------


def _echo_json(obj) -> None:
    click.echo(json.dumps(obj, indent=2, ensure_ascii=False))


def _find_yaml_files(root: Path, recursive: bool = True) -> list[Path]:
    if recursive:
        return sorted(list(root.rglob("*.yaml")) + list(root.rglob("*.yml")))
    return sorted(list(root.glob("*.yaml")) + list(root.glob("*.yml")))


def _registry_path(registry: Optional[str]) -> Path:
    if registry:
        return Path(registry)
    default = get_settings().DESCRIPTORS_FILE
    if default is None:
        raise click.UsageError("No registry given; pass --registry or set DESCRIPTORS_FILE.")
    return default


# -------- CLI root --------


@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None,
    help="Override LOG_LEVEL from settings",
)
@click.version_option(package_name="component-locator")
def cli(log_level: Optional[str]):
    _ = get_settings()
    if log_level:
        set_log_level(log_level.upper())


# -------- commands --------


@cli.command("config")
def cmd_config():
    """Print effective configuration (after .env & env vars)."""
    s = get_settings()
    data = {}
    for k, v in s.model_dump().items():
        data[k] = v.value if hasattr(v, "value") else (str(v) if isinstance(v, Path) else v)
    _echo_json(data)


@cli.command("validate")
@click.argument("targets", nargs=-1, required=False)
@click.option("--dir", "registry_dir", type=click.Path(file_okay=False, dir_okay=True, exists=True),
              help="Validate every registry under this directory")
@click.option("--recursive/--no-recursive", default=True, show_default=True)
def cmd_validate(targets: List[str], registry_dir: Optional[str], recursive: bool):
    """Validate descriptor registry files (supports multi-doc YAML)."""
    paths: list[Path] = []
    if targets:
        for p in (Path(t).resolve() for t in targets):
            paths.extend(_find_yaml_files(p, recursive=True) if p.is_dir() else [p])
    elif registry_dir:
        paths.extend(_find_yaml_files(Path(registry_dir), recursive=recursive))
    else:
        click.echo("Provide file(s) or --dir to validate.")
        sys.exit(2)

    ok = True
    for fp in paths:
        try:
            descriptors = load_descriptors_file(fp)
        except (OSError, ValueError) as e:
            ok = False
            click.echo(f"ERR {fp}  ->  {e}")
            continue
        names = ", ".join(sorted(descriptors))
        click.echo(f"OK  {fp}  ->  {len(descriptors)} descriptor(s): {names}")

    sys.exit(0 if ok else 1)


@cli.command("locate")
@click.argument("html_file", type=click.Path(dir_okay=False, exists=True))
@click.argument("name")
@click.option("--registry", type=click.Path(dir_okay=False, exists=True), default=None,
              help="Descriptor registry (defaults to DESCRIPTORS_FILE)")
@click.option("--text", "text", default=None, help="Literal text criterion")
@click.option("--regex", "pattern", default=None, help="Regular-expression text criterion")
@click.option("--all", "find_all", is_flag=True, default=False, help="Yield every match")
@click.option("--timeout-ms", type=int, default=0, show_default=True, help="Retry budget")
def cmd_locate(
    html_file: str,
    name: str,
    registry: Optional[str],
    text: Optional[str],
    pattern: Optional[str],
    find_all: bool,
    timeout_ms: int,
):
    """
    Run a registry descriptor against an HTML snapshot.

    Examples:
      component-locator locate page.html Input --text "First Name"
      component-locator locate page.html Select --all --registry gears.yaml
    """
    if text is not None and pattern is not None:
        raise click.UsageError("--text and --regex are mutually exclusive")

    descriptors = load_descriptors_file(_registry_path(registry))
    if name not in descriptors:
        raise click.UsageError(f"Unknown descriptor {name!r}; known: {', '.join(sorted(descriptors))}")

    criterion = re.compile(pattern) if pattern is not None else text
    opts = {"all": find_all, "timeout_ms": timeout_ms}
    args = [criterion, opts] if criterion else [opts]

    dom = SoupDom.from_file(html_file)
    locator = ComponentLocator(dom)
    try:
        found = locator.component(descriptors[name], *args).get()
    except ComponentLocatorError as e:
        click.echo(f"ERR {e}")
        sys.exit(1)

    click.echo(f"{found.selector}: {len(found)} element(s)")
    for el in found:
        click.echo(f" - {dom.describe(el)} {dom.text(el)!r}")
    sys.exit(0 if len(found) else 1)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
