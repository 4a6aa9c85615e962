import logging
import pathlib
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from lrcat import lron, models
from lrcat.catalog import Catalog
from lrcat.configuration import SECTIONS, make_config
from lrcat.errors import LrcatError
from lrcat.folders import Folders
from lrcat.keyword_tree import KeywordTree
from lrcat.lrobject import LrId

logger = logging.getLogger(__name__)
console = Console()

app = typer.Typer(help="Read Adobe Lightroom catalogs")

VALID_LOG_LEVELS = ["CRITICAL", "DEBUG", "ERROR", "FATAL", "INFO", "WARNING"]


@app.command()
def dump(
    path: Annotated[Optional[pathlib.Path], typer.Argument(help="Catalog (.lrcat) to read")] = None,
    all_objects: Annotated[bool, typer.Option("--all", help="Select all objects")] = False,
    keywords: Annotated[bool, typer.Option(help="Select keywords")] = False,
    folders: Annotated[bool, typer.Option(help="Select folders")] = False,
    libfiles: Annotated[bool, typer.Option(help="Select library files")] = False,
    images: Annotated[bool, typer.Option(help="Select images")] = False,
    collections: Annotated[bool, typer.Option(help="Select collections")] = False,
    log_level: Annotated[Optional[str], typer.Option(help="Set the logging level")] = None,
):
    """
    Dump the objects of a catalog.

    The catalog path can also be provided via the `catalog_path` key of lrcat.conf / lrcat.my.conf.
    """
    if log_level is not None and log_level not in VALID_LOG_LEVELS:
        typer.echo(f"Error: Invalid log level '{log_level}'. Valid levels: {', '.join(VALID_LOG_LEVELS)}")
        raise typer.Exit(code=1)

    selected = {
        "keywords": keywords,
        "folders": folders,
        "libfiles": libfiles,
        "images": images,
        "collections": collections,
    }
    sections = frozenset(SECTIONS) if all_objects else frozenset(name for name, on in selected.items() if on)

    try:
        config = make_config(catalog_path=path, sections=sections, log_level=log_level)
    except ValueError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(code=1)

    catalog = Catalog(config.catalog_path)
    try:
        catalog.open()
    except LrcatError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    try:
        process_dump(catalog, config.sections)
    except LrcatError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    finally:
        catalog.close()


def process_dump(catalog: Catalog, sections: frozenset[str]):
    catalog.load_version()

    console.print("Catalog:")
    console.print(f"\tVersion: {catalog.version} ({catalog.catalog_version.name})")
    console.print(f"\tRoot keyword id: {catalog.root_keyword_id}")

    if not catalog.catalog_version.is_supported():
        console.print("Unsupported catalog version")
        raise typer.Exit(code=1)

    keywords = catalog.load_keywords()
    console.print(f"\tKeywords count: {len(keywords)}")
    if "keywords" in sections:
        dump_keywords(catalog.root_keyword_id, keywords, catalog.load_keywords_tree())

    folders = catalog.load_folders()
    if "folders" in sections:
        dump_folders(folders)

    libfiles = catalog.load_library_files()
    if "libfiles" in sections:
        dump_libfiles(libfiles)

    images = catalog.load_images()
    if "images" in sections:
        dump_images(images)

    collections = catalog.load_collections()
    if "collections" in sections:
        dump_collections(collections)


def _add_keyword_rows(
    table: Table,
    level: int,
    keyword_id: LrId,
    keywords: dict[LrId, models.Keyword],
    tree: KeywordTree,
):
    keyword = keywords.get(keyword_id)
    if keyword is None:
        return

    indent = " " * (level - 1) + "+ " if level > 0 else ""
    table.add_row(str(keyword.id), keyword.uuid, str(keyword.parent), f"{indent}{keyword.name}")

    for child_id in tree.children_for(keyword_id):
        _add_keyword_rows(table, level + 1, child_id, keywords, tree)


def dump_keywords(root: LrId, keywords: dict[LrId, models.Keyword], tree: KeywordTree):
    table = Table(title="Keywords")
    for column in ("id", "uuid", "parent", "name"):
        table.add_column(column)

    # The root keyword itself is not always a row, start from its children
    if root in keywords:
        _add_keyword_rows(table, 0, root, keywords, tree)
    else:
        for child_id in tree.children_for(root):
            _add_keyword_rows(table, 0, child_id, keywords, tree)

    console.print(table)


def dump_folders(folders: Folders):
    roots = Table(title="Root Folders")
    for column in ("id", "uuid", "name", "absolute path"):
        roots.add_column(column)

    for root in folders.roots:
        roots.add_row(str(root.id), root.uuid, root.name, root.absolute_path)

    console.print(roots)

    table = Table(title="Folders")
    for column in ("id", "uuid", "root", "path", "content"):
        table.add_column(column)

    for folder in folders.folders:
        table.add_row(
            str(folder.id),
            folder.uuid,
            str(folder.root_folder),
            folders.resolve_folder_path(folder) or folder.path_from_root,
            repr(folder.content),
        )

    console.print(table)


def dump_libfiles(libfiles: list[models.LibraryFile]):
    table = Table(title="Libfiles")
    for column in ("id", "uuid", "folder", "extension", "basename", "sidecars"):
        table.add_column(column)

    for libfile in libfiles:
        table.add_row(
            str(libfile.id),
            libfile.uuid,
            str(libfile.folder),
            libfile.extension,
            libfile.basename,
            libfile.sidecar_extensions,
        )

    console.print(table)


def dump_images(images: list[models.Image]):
    table = Table(title="Images")
    for column in ("id", "uuid", "root", "format", "orientation", "pick", "xmp", "properties"):
        table.add_column(column)

    for image in images:
        table.add_row(
            str(image.id),
            image.uuid,
            str(image.root_file),
            image.file_format,
            f"{image.orientation or ''}({image.exif_orientation})",
            str(image.pick),
            f"{len(image.xmp)} bytes",
            repr(image.properties),
        )

    console.print(table)


def dump_collections(collections: list[models.Collection]):
    table = Table(title="Collections")
    for column in ("id", "name", "parent", "system", "content"):
        table.add_column(column)

    for collection in collections:
        table.add_row(
            str(collection.id),
            collection.name,
            str(collection.parent),
            str(collection.system_only),
            repr(collection.content),
        )

    console.print(table)


@app.command("lron")
def lron_dump(files: Annotated[list[pathlib.Path], typer.Argument(help="Files holding lron documents")]):
    """
    Parse lron files and print the parsed tree, or the parse error
    """
    failed = False

    for file_path in files:
        try:
            text = file_path.read_text()
        except OSError as e:
            console.print(f"Error reading {file_path}: {e}")
            failed = True
            continue

        try:
            console.print(lron.parse(text))
        except lron.LronParseError as e:
            console.print(f"Error parsing file {file_path}: {e}")
            failed = True

    if failed:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
