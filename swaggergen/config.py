import json
import os
from pathlib import Path

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from swaggergen.exceptions import ConfigurationError

DEFAULT_FILENAMES = ['swaggergen.yaml', 'swaggergen.yml']
DEFAULT_OUTPUT = 'api_generate'


class GenerationOptions(BaseSettings):
    """Options for one generation run.

    Every field can also be set from the environment with the
    ``SWAGGERGEN_`` prefix, e.g. ``SWAGGERGEN_BASE_URL``.
    """

    model_config = SettingsConfigDict(env_prefix='SWAGGERGEN_', extra='forbid')

    input: str | None = Field(
        None, description='Path or URL to the OpenAPI/Swagger document.'
    )

    output: str = Field(
        DEFAULT_OUTPUT, description='Output directory for the generated client.'
    )

    base_url: str | None = Field(
        None,
        description='Base URL baked into the client; overrides the document servers.',
    )

    enable_logging: bool = Field(
        False, description='Whether the generated client logs every request.'
    )

    timeout: int = Field(30000, gt=0, description='Request timeout in milliseconds.')

    retries: int = Field(
        3, ge=0, description='Connection retries of the generated client transport.'
    )

    clean: bool = Field(
        False, description='Remove the output directory contents before writing.'
    )


def load_yaml(path: str | Path) -> dict:
    return yaml.safe_load(Path(path).read_text(encoding='utf-8'))


def load_json(path: str | Path) -> dict:
    return json.loads(Path(path).read_text(encoding='utf-8'))


def _validate(data, source: str) -> GenerationOptions:
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError('Configuration must be a mapping', config_path=source)
    try:
        return GenerationOptions(**data)
    except ValidationError as e:
        error = e.errors()[0]
        field = '.'.join(str(part) for part in error['loc']) or None
        raise ConfigurationError(
            f'Invalid configuration: {error["msg"]}', config_path=source, field=field
        ) from e


def _load_file(path: Path) -> GenerationOptions:
    try:
        if path.suffix.lower() == '.json':
            data = load_json(path)
        else:
            data = load_yaml(path)
    except FileNotFoundError as e:
        raise ConfigurationError('Configuration file not found', config_path=str(path)) from e
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(
            f'Could not read configuration: {e}', config_path=str(path)
        ) from e
    return _validate(data, str(path))


def get_config(path: str | None = None) -> GenerationOptions:
    """Load configuration from a file, or fall back to the environment.

    Lookup order: the given YAML/JSON file, ``swaggergen.yaml`` or
    ``swaggergen.yml`` in the current directory, the ``[tool.swaggergen]``
    table of ``pyproject.toml``, then environment variables alone.

    Raises:
        ConfigurationError: If a configuration source is unreadable or invalid.
    """
    if path:
        return _load_file(Path(path))

    cwd = Path(os.getcwd())

    for filename in DEFAULT_FILENAMES:
        candidate = cwd / filename
        if candidate.exists():
            return _load_file(candidate)

    pyproject_path = cwd / 'pyproject.toml'

    if pyproject_path.exists():
        import tomllib

        try:
            pyproject = tomllib.loads(pyproject_path.read_text(encoding='utf-8'))
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(
                f'Could not read configuration: {e}', config_path=str(pyproject_path)
            ) from e
        tools = pyproject.get('tool', {})

        if 'swaggergen' in tools:
            return _validate(tools['swaggergen'], str(pyproject_path))

    return GenerationOptions()
