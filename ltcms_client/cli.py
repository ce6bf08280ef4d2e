"""Cyclopts CLI entrypoint for inspecting a tutorial CMS from the terminal.

The ``ltcms`` console script defined here loads the merged site content,
the header navigation, published pages and the tutorial list through the
same stores an application would use, and exposes the slug and URL
sanitisers for quick checks. Options can also be supplied through
``LTCMS_*`` environment variables.

Examples
--------
Print the merged navigation of a local backend:

>>> from ltcms_client.cli import app
>>> app(["nav", "--base-url", "http://localhost:8489/api"])  # doctest: +SKIP

Check a slug before creating a page:

>>> app(["slug", "Linux Grundlagen für Einsteiger"])  # doctest: +SKIP
linux-grundlagen-fur-einsteiger
"""

from __future__ import annotations

import contextlib
import dataclasses as dc
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter
from ruamel.yaml import YAML

from .client import ApiError
from .content import CONTENT_SECTIONS
from .settings import DEFAULT_CONFIG_PATH, load_settings
from .slug import is_valid_slug, sanitize_slug
from .state import AppState
from .tutorials import LoadState
from .urls import sanitize_external_url

if typ.TYPE_CHECKING:
    import collections.abc as cabc

app = App(name="ltcms", config=cyclopts.config.Env("LTCMS_", command=False))  # type: ignore[unknown-argument]

ConfigOption = typ.Annotated[
    Path, Parameter(help="Path to the client config (TOML)", env_var="LTCMS_CONFIG_FILE")
]
BaseUrlOption = typ.Annotated[
    str | None,
    Parameter(help="Override the API base URL", env_var="LTCMS_API_BASE_URL"),
]


@contextlib.contextmanager
def _open_state(config: Path, base_url: str | None) -> cabc.Iterator[AppState]:
    """Yield an application state built from ``config`` and close it afterwards."""
    settings = load_settings(config)
    if base_url:
        settings = dc.replace(settings, base_url=base_url.rstrip("/"))
    state = AppState.create(settings)
    try:
        yield state
    finally:
        state.close()


def _fail(message: str) -> typ.NoReturn:
    print(message, file=sys.stderr)
    raise SystemExit(1)


@app.command(help="Print the merged site content as YAML.")
def content(
    *,
    section: typ.Annotated[
        str | None, Parameter(help="Only print this content section")
    ] = None,
    config: ConfigOption = DEFAULT_CONFIG_PATH,
    base_url: BaseUrlOption = None,
) -> None:
    """Load every content section and dump it to stdout.

    Parameters
    ----------
    section : str or None, optional
        Restrict the output to one section, e.g. ``hero`` or ``header``.
    config : Path, optional
        Client configuration file.
    base_url : str or None, optional
        API base URL overriding the configuration.

    Raises
    ------
    SystemExit
        With status 1 when the content cannot be loaded or ``section`` is
        unknown.
    """
    with _open_state(config, base_url) as state:
        state.content.load_content()
        if state.content.error is not None:
            _fail(f"error: {state.content.error}")
        data = dict(state.content.content)

    if section is not None:
        if section not in data:
            known = ", ".join(CONTENT_SECTIONS)
            _fail(f"error: unknown section '{section}' (known: {known})")
        data = {section: data[section]}

    yaml = YAML()
    yaml.default_flow_style = False
    yaml.dump(data, sys.stdout)


@app.command(help="Print the merged header navigation.")
def nav(
    *,
    config: ConfigOption = DEFAULT_CONFIG_PATH,
    base_url: BaseUrlOption = None,
) -> None:
    """Print one line per navigation item: label, target, and source."""
    with _open_state(config, base_url) as state:
        state.content.load_content()
        state.content.load_navigation()
        if state.content.navigation_error is not None:
            print(
                f"warning: dynamic navigation unavailable: {state.content.navigation_error}",
                file=sys.stderr,
            )
        items = state.content.navigation.items

    for item in items:
        target = f"{item.target.kind}:{item.target.value}" if item.target else "-"
        print(f"{item.label}\t{target}\t({item.source})")


@app.command(help="Fetch a published page and list its posts.")
def page(
    slug: str,
    *,
    config: ConfigOption = DEFAULT_CONFIG_PATH,
    base_url: BaseUrlOption = None,
) -> None:
    """Print the page title followed by its posts in display order."""
    with _open_state(config, base_url) as state:
        try:
            published = state.pages.fetch_published_page(slug)
        except (ApiError, ValueError) as exc:
            _fail(f"error: {exc}")

    if published is None:  # pragma: no cover - only when cancelled
        return
    print(published.page.title)
    if published.page.description:
        print(published.page.description)
    for post in published.posts:
        print(f"- {post.slug}: {post.title}")


@app.command(help="Load the tutorial list, retrying transient failures.")
def tutorials(
    *,
    config: ConfigOption = DEFAULT_CONFIG_PATH,
    base_url: BaseUrlOption = None,
) -> None:
    """Print one line per tutorial: id, title, and topics."""
    with _open_state(config, base_url) as state:
        outcome = state.tutorials.load_tutorials()
        if outcome is LoadState.FAILED:
            _fail(f"error: {state.tutorials.error}")
        loaded = state.tutorials.tutorials

    for tutorial in loaded:
        print(f"{tutorial.id}\t{tutorial.title}\t[{', '.join(tutorial.topics)}]")


@app.command(help="Search tutorials by text and optional topic.")
def search(
    query: str,
    *,
    topic: typ.Annotated[str | None, Parameter(help="Restrict to a topic")] = None,
    config: ConfigOption = DEFAULT_CONFIG_PATH,
    base_url: BaseUrlOption = None,
) -> None:
    """Print the matching tutorials, or a note when nothing matched."""
    with _open_state(config, base_url) as state:
        try:
            results = state.tutorials.search(query, topic=topic)
        except ApiError as exc:
            _fail(f"error: {exc}")

    if not results:
        print("no tutorials found")
        return
    for tutorial in results:
        print(f"{tutorial.id}\t{tutorial.title}")


@app.command(help="Print the URL slug derived from TEXT.")
def slug(text: str) -> None:
    """Print ``sanitize_slug(text)``; exit 1 when nothing usable remains."""
    result = sanitize_slug(text)
    if not is_valid_slug(result):
        _fail(f"error: no slug can be derived from {text!r}")
    print(result)


@app.command(name="check-url", help="Print the sanitised URL or report it as unsafe.")
def check_url(url: str) -> None:
    """Print the sanitised form of ``url``; exit 1 when the URL is rejected."""
    result = sanitize_external_url(url)
    if result is None:
        _fail(f"unsafe: {url}")
    print(result)


def main() -> None:
    """Invoke the Cyclopts application behind the ``ltcms`` console command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
