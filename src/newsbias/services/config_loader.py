"""Configuration loading from YAML files."""

from pathlib import Path
from typing import Any, Dict, List

import yaml
from pydantic import ValidationError

from newsbias.core.config import DEFAULT_DATA_DIR, KeywordTables, SourceProfile
from newsbias.utils.exceptions import ConfigurationError
from newsbias.utils.logging import get_logger

logger = get_logger(__name__)


def load_yaml(file_path: Path) -> Dict[str, Any]:
    """Load YAML file.

    Args:
        file_path: Path to YAML file

    Returns:
        Parsed YAML data

    Raises:
        ConfigurationError: If file doesn't exist or is invalid
    """
    if not file_path.exists():
        raise ConfigurationError(f"Configuration file not found: {file_path}")

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
            if data is None:
                return {}
            if not isinstance(data, dict):
                raise ConfigurationError(f"Expected a mapping at top level of {file_path}")
            return data
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {file_path}: {e}") from e


def load_sources_config(data_dir: Path = DEFAULT_DATA_DIR) -> List[SourceProfile]:
    """Load publisher profiles from sources.yaml.

    Args:
        data_dir: Data directory path

    Returns:
        List of SourceProfile objects, in file order

    Raises:
        ConfigurationError: If an entry is invalid or names are duplicated
    """
    sources_path = Path(data_dir) / "sources.yaml"

    data = load_yaml(sources_path)
    sources_data = data.get("sources", [])

    sources = []
    seen = set()
    for source_data in sources_data:
        try:
            source = SourceProfile(**source_data)
        except (ValidationError, TypeError) as e:
            name = source_data.get("name", "unknown") if isinstance(source_data, dict) else "unknown"
            raise ConfigurationError(f"Invalid source configuration: {name}: {e}") from e

        if source.name in seen:
            raise ConfigurationError(f"Duplicate source name: {source.name}")
        seen.add(source.name)
        sources.append(source)

    logger.debug(
        "sources_config_loaded",
        path=str(sources_path),
        version=data.get("version"),
        count=len(sources),
    )

    return sources


def load_keyword_tables(data_dir: Path = DEFAULT_DATA_DIR) -> KeywordTables:
    """Load keyword corpora from keywords.yaml.

    Args:
        data_dir: Data directory path

    Returns:
        KeywordTables object

    Raises:
        ConfigurationError: If the file is missing or invalid
    """
    keywords_path = Path(data_dir) / "keywords.yaml"

    data = load_yaml(keywords_path)

    try:
        tables = KeywordTables(**data)
    except (ValidationError, TypeError) as e:
        raise ConfigurationError(f"Invalid keyword configuration: {e}") from e

    logger.debug("keyword_tables_loaded", path=str(keywords_path), version=tables.version)

    return tables
