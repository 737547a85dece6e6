"""CLI entry point for media-prettify."""

from pathlib import Path

import click
from loguru import logger

from .api.tmdb import make_fetcher
from .cache import MetadataStore
from .config import PrettifyConfig
from .errors import ConfigError
from .models import VIDEO_EXTENSIONS
from .prettify import prettify
from .sorting import normalize_for_sorting

log = logger.bind(stage="cli")


def _find_config_file() -> Path | None:
    """Look for .env in the current directory."""
    candidate = Path.cwd() / ".env"
    if candidate.is_file():
        return candidate
    return None


def _expand_names(names: tuple[str, ...]) -> list[tuple[str, str]]:
    """Return (file name, file identity) pairs.

    Directories expand to the video files inside them. Arguments that are
    not existing paths are taken as bare file names and identify themselves.
    """
    entries: list[tuple[str, str]] = []
    for name in names:
        path = Path(name)
        if path.is_dir():
            videos = sorted(
                f for f in path.rglob("*")
                if f.is_file() and f.suffix.lower() in VIDEO_EXTENSIONS
            )
            log.debug(f"Expanded {path} to {len(videos)} video files")
            entries.extend((f.name, str(f.resolve())) for f in videos)
        elif path.is_file():
            entries.append((path.name, str(path.resolve())))
        else:
            entries.append((name, name))
    return entries


@click.command()
@click.argument("names", nargs=-1, required=True)
@click.option(
    "--sort",
    "sort_names",
    is_flag=True,
    help="Print the names ordered by their sort key instead of prettifying them.",
)
@click.option(
    "--prettify-sort/--no-prettify-sort",
    default=None,
    help="Strip group tags and separators from sort keys (PRETTIFY_FILENAMES).",
)
@click.option(
    "--ignore-article/--keep-article",
    default=None,
    help='Ignore a leading "A" or "The" when sorting (IGNORE_LEADING_ARTICLE).',
)
@click.option(
    "--lookup",
    is_flag=True,
    help="Refine titles with TMDb metadata. Needs TMDB_API_KEY.",
)
@click.option(
    "--no-external-info",
    is_flag=True,
    help="Never consult cached metadata or flag episodes for lookup.",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=True),
    default=None,
    help="Path to .env file.",
)
def main(
    names: tuple[str, ...],
    sort_names: bool,
    prettify_sort: bool | None,
    ignore_article: bool | None,
    lookup: bool,
    no_external_info: bool,
    verbose: bool,
    config_file: str | None,
) -> None:
    """Turn scene, P2P, and fansub media file names into clean titles."""
    env_file = Path(config_file) if config_file else _find_config_file()

    # Pass CLI flags as kwargs so they win over .env and environment
    config_kwargs: dict[str, bool | str] = {}
    if verbose:
        config_kwargs["log_level"] = "DEBUG"
    if no_external_info:
        config_kwargs["use_external_info"] = False
    if prettify_sort is not None:
        config_kwargs["prettify_filenames"] = prettify_sort
    if ignore_article is not None:
        config_kwargs["ignore_leading_article"] = ignore_article

    config = PrettifyConfig(_env_file=env_file, **config_kwargs)  # type: ignore[arg-type]
    config.setup_logging()

    entries = _expand_names(names)

    if sort_names:
        ordered = sorted(
            entries,
            key=lambda entry: normalize_for_sorting(
                entry[0], config.prettify_filenames, config.ignore_leading_article,
            ).casefold(),
        )
        for name, _ in ordered:
            click.echo(name)
        return

    store = None
    if lookup:
        if not config.use_external_info:
            raise click.UsageError("--lookup cannot be combined with --no-external-info.")
        try:
            api_key = config.require_tmdb_api_key()
        except ConfigError as e:
            raise click.UsageError(str(e)) from e
        store = MetadataStore(
            config.cache_db,
            fetcher=make_fetcher(api_key, config.tmdb_language),
            max_workers=config.lookup_workers,
        )

    try:
        if store is not None:
            # First pass only requests lookups for entries not cached yet
            for name, identity in entries:
                prettify(name, identity, store)
            ran = store.wait()
            log.info(f"Finished {ran} metadata lookups")

        for name, identity in entries:
            title = prettify(name, identity, store, config.use_external_info)
            click.echo(f"{name} -> {title}")
    finally:
        if store is not None:
            store.close()
