"""Click integration and the manifest-version command."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple, TypeVar

import click

from . import get_version
from .config import load_config, logging_level, search_path_entries
from .locator import ResourceLocator, SearchPathLocator
from .logging_config import setup_logging
from .provider import ManifestVersionProvider, ResourceEnumerationError

F = TypeVar("F", bound=Callable[..., Any])

DEFAULT_UNKNOWN_MESSAGE = "%(prog)s version unknown"


def manifest_version_option(
    project: str,
    *param_decls: str,
    locator: Optional[ResourceLocator] = None,
    message: Optional[str] = None,
    **kwargs: Any,
) -> Callable[[F], F]:
    """Add a ``--version`` option that reports the version found in the manifest.

    Works like :func:`click.version_option`, but the text comes from the
    ``Implementation-Title``/``Implementation-Version`` pair of the manifest
    titled ``project``. Each resolved line is echoed; when no manifest
    matches, ``message`` (default ``"%(prog)s version unknown"``) is echoed
    instead. The provider is built when the option is used, not at import.
    """
    if not param_decls:
        param_decls = ("--version", "-V")

    def callback(ctx: click.Context, param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return

        provider = ManifestVersionProvider(project, locator)
        try:
            lines = provider.get_version()
        except ResourceEnumerationError as err:
            raise click.ClickException(str(err)) from err

        if not lines:
            prog = ctx.find_root().info_name or project
            lines = [(message or DEFAULT_UNKNOWN_MESSAGE) % {"prog": prog, "project": project}]
        for line in lines:
            click.echo(line)
        ctx.exit()

    kwargs.setdefault("is_flag", True)
    kwargs.setdefault("expose_value", False)
    kwargs.setdefault("is_eager", True)
    kwargs.setdefault("help", "Show the version and exit.")
    kwargs["callback"] = callback
    return click.option(*param_decls, **kwargs)


@click.command()
@click.argument("project")
@click.option(
    "--path",
    "-p",
    "paths",
    multiple=True,
    type=click.Path(path_type=Path),
    help="검색 경로 앞쪽에 추가할 디렉터리 또는 아카이브",
)
@click.option("--no-sys-path", is_flag=True, help="sys.path 항목을 검색하지 않음")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="설정 파일 경로",
)
@click.option("--verbose", "-v", is_flag=True, help="디버그 로그 출력")
@click.version_option(version=get_version(), prog_name="manifest-version")
@click.pass_context
def main(
    ctx: click.Context,
    project: str,
    paths: Tuple[Path, ...],
    no_sys_path: bool,
    config_path: Optional[Path],
    verbose: bool,
) -> None:
    """PROJECT 제목을 가진 매니페스트에서 버전을 찾아 출력합니다."""
    try:
        config = load_config(config_path)
        entries = _search_entries(config, paths, no_sys_path)
        level = logging_level(config)
        setup_logging("DEBUG" if verbose else level)
    except (RuntimeError, ValueError) as err:
        raise click.UsageError(str(err)) from err

    provider = ManifestVersionProvider(project, SearchPathLocator(entries))
    try:
        lines = provider.get_version()
    except ResourceEnumerationError as err:
        raise click.ClickException(str(err)) from err

    if not lines:
        click.echo(f"'{project}' 제목의 매니페스트를 찾을 수 없습니다.", err=True)
        ctx.exit(1)

    for line in lines:
        click.echo(line)


def _search_entries(config: dict, paths: Tuple[Path, ...], no_sys_path: bool) -> List[str]:
    entries = [str(path) for path in paths]
    entries.extend(search_path_entries(config))
    section = config.get("search_path", {})
    include_sys_path = bool(section.get("include_sys_path", True)) if isinstance(section, dict) else True
    if include_sys_path and not no_sys_path:
        entries.extend(sys.path)
    return entries


if __name__ == "__main__":  # pragma: no cover
    main()
