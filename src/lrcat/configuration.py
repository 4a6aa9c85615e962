import dataclasses
import logging
import pathlib
import sys

# The object types that can be dumped from a catalog
SECTIONS = ("keywords", "folders", "libfiles", "images", "collections")


@dataclasses.dataclass(frozen=True)
class Config:
    """
    Global configuration object, configuration taken from config files and CLI
    """

    catalog_path: pathlib.Path
    sections: frozenset[str] = frozenset()
    log_level: str = "INFO"


def get_config_files() -> list[pathlib.Path]:
    """
    Resolve a list of config file paths to be read (in that order) into the Configuration object
    """
    config_files_dir_path = pathlib.Path(__file__).parent.parent.parent.resolve()
    return [config_files_dir_path.joinpath(config_file_name) for config_file_name in ("lrcat.conf", "lrcat.my.conf")]


def load_config_from_files(config_files: list[pathlib.Path] | None = None) -> dict[str, str]:
    """
    Load configuration from config files if they exist. Later files override earlier ones.

    The config files use a simple key=value format. Lines starting with # or ; are comments.
    """
    config_dict = {}

    for config_file in config_files if config_files is not None else get_config_files():
        if not config_file.exists():
            continue

        with config_file.open() as f:
            for line in f:
                line = line.strip()

                # Skip empty lines and comments
                if not line or line.startswith("#") or line.startswith(";"):
                    continue

                if "=" in line:
                    key, value = line.split("=", 1)
                    key = key.strip()
                    value = value.strip()

                    # Only add non-empty values
                    if value:
                        config_dict[key] = value

    return config_dict


def configure_logging(log_level: str):
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)

    logging.basicConfig(
        stream=sys.stdout,
        level=log_level,
        format="%(asctime)s - [%(levelname)s] %(message)s",
    )

    logging.getLogger().setLevel(log_level)


def make_config(
    catalog_path: pathlib.Path | None = None,
    sections: frozenset[str] = frozenset(),
    log_level: str | None = None,
    config_files: list[pathlib.Path] | None = None,
) -> Config:
    """
    Create a Config object from the provided parameters, loading defaults from config files.
    Command line parameters override config file values.
    """
    file_config = load_config_from_files(config_files)

    if catalog_path is None:
        file_value = file_config.get("catalog_path")
        if not file_value:
            raise ValueError("Required parameter 'catalog_path' not provided via CLI or config file")

        catalog_path = pathlib.Path(file_value).expanduser()

    log_level = log_level or file_config.get("log_level", "INFO")

    unknown_sections = sections - set(SECTIONS)
    if unknown_sections:
        raise ValueError(f"Unknown sections: {', '.join(sorted(unknown_sections))}")

    configure_logging(log_level)

    return Config(catalog_path=catalog_path, sections=sections, log_level=log_level)
