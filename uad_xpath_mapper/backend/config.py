"""
Configuration Module
Options for the XPath generator, loadable from a JSON defaults file
"""
from pathlib import Path
from typing import Any, List, Optional, Union
import json
import logging

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


class XPathOptions(BaseModel):
    """
    Settings for one generator run.

    Field names are snake_case; the camelCase aliases (namespacePrefix,
    includeElements, ...) are accepted as well, which is how JSON defaults
    files spell them.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra='ignore')

    namespace_prefix: str = "d"
    include_elements: List[str] = Field(default_factory=lambda: ["PROPERTY", "IMAGE"])
    predicate_attribute_name: Optional[str] = "ValuationUseType"
    filter_parent_type: Optional[str] = "IMAGE"
    filter_child_type: Optional[str] = "ImageCategoryType"
    always_show_index: bool = False
    composite_grouping: bool = True
    debug: bool = False

    @field_validator('include_elements', mode='before')
    @classmethod
    def _split_includes(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.split(',')
        if isinstance(value, (list, tuple, set)):
            return [str(v).strip().upper() for v in value if str(v).strip()]
        return value

    @field_validator('predicate_attribute_name', 'filter_parent_type', 'filter_child_type', mode='before')
    @classmethod
    def _blank_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value.strip() if isinstance(value, str) else value

    @field_validator('namespace_prefix')
    @classmethod
    def _check_prefix(cls, value: str) -> str:
        value = value.strip().rstrip(':')
        if not value:
            raise ValueError('namespace prefix must not be empty')
        return value

    def includes(self, bare_tag: str) -> bool:
        """Case-insensitive membership in the inclusion set"""
        return bare_tag.upper() in self.include_elements

    def describe(self) -> str:
        return json.dumps(self.model_dump(by_alias=True), sort_keys=True)


def load_options(defaults_path: Optional[Union[str, Path]] = None, **overrides) -> XPathOptions:
    """
    Build options from an optional JSON defaults file plus explicit overrides.

    Args:
        defaults_path: JSON object with option values (either naming style)
        **overrides: field values that win over the file; None means "not given"

    Returns:
        Validated XPathOptions

    Raises:
        ConfigurationError: the file cannot be read or the values are invalid
    """
    data = {}
    if defaults_path:
        path = Path(defaults_path)
        try:
            raw = json.loads(path.read_text(encoding='utf-8'))
        except OSError as e:
            raise ConfigurationError(f"Cannot read defaults file {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Defaults file {path} is not valid JSON: {e}") from e
        if not isinstance(raw, dict):
            raise ConfigurationError(f"Defaults file {path} must contain a JSON object")
        try:
            data = XPathOptions.model_validate(raw).model_dump()
        except ValidationError as e:
            raise ConfigurationError(f"Invalid defaults in {path}: {e}") from e
        logger.info(f"Loaded defaults from {path}")

    data.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return XPathOptions.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid options: {e}") from e
