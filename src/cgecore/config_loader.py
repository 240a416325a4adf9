"""Load RunSpecs from YAML run configurations.

A run configuration names its blocks through the block registry:

.. code-block:: yaml

    template:
      name: Demo
      required_sections: [production, trade]
    sets:
      commodities: [agr, mfg]
      activities: [agr, mfg]
      factors: [lab, cap]
      institutions: [hh]
    mappings:
      activity_to_output: {agr: agr, mfg: mfg}
    closure: {numeraire: lab}
    scenario: {name: baseline, shocks: {}}
    allowed_sections: [production, trade]
    required_nonempty: [production]
    sections:
      production:
        - block: CESValueAdded
          options: {sigma: 0.8}
      trade: []

A top-level ``name`` may replace ``template``. Section order in the file
is the block order of the resulting RunSpec.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from cgecore.assembly import build_spec
from cgecore.blocks.base import BlockRegistry, get_registry
from cgecore.core.sets import Mappings, Sets
from cgecore.core.specs import (
    ClosureSpec,
    RunSpec,
    RunSpecTemplate,
    ScenarioSpec,
    SectionSpec,
)
from cgecore.errors import ConfigError

logger = logging.getLogger(__name__)


def _mapping(value: Any, field_name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"{field_name} must be a mapping")
    return value


def _names(value: Any, field_name: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError(f"{field_name} must be a list")
    return [str(item).strip() for item in value]


def _build_block(entry: Any, section_name: str, registry: BlockRegistry) -> Any:
    if isinstance(entry, str):
        entry = {"block": entry}
    if not isinstance(entry, dict) or not entry.get("block"):
        raise ConfigError(f"sections.{section_name}: each entry needs a 'block' name")
    block_name = str(entry["block"])
    options = _mapping(entry.get("options"), f"sections.{section_name}.{block_name}.options")
    if block_name not in registry:
        raise ConfigError(f"sections.{section_name}: unknown block '{block_name}'")
    return registry.create(block_name, **options)


def _names_or_entries(value: Any, section_name: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError(f"sections.{section_name} must be a list of blocks")
    return value


def _build_sections(payload: Any, registry: BlockRegistry) -> list[SectionSpec]:
    raw_sections = _mapping(payload, "sections")
    sections: list[SectionSpec] = []
    for name, entries in raw_sections.items():
        blocks = [
            _build_block(entry, str(name), registry)
            for entry in _names_or_entries(entries, str(name))
        ]
        sections.append(SectionSpec(name=str(name), blocks=tuple(blocks)))
    return sections


def build_spec_from_config(
    payload: dict[str, Any],
    registry: BlockRegistry | None = None,
) -> RunSpec:
    """Assemble a RunSpec from a parsed run configuration.

    Args:
        payload: Parsed configuration mapping
        registry: Block registry (defaults to the global registry)

    Returns:
        The validated RunSpec

    Raises:
        ConfigError: If the configuration is malformed
        RunSpecError: If assembly or strict validation fails
    """
    if not isinstance(payload, dict):
        raise ConfigError("Run configuration must define a top-level mapping")
    registry = registry or get_registry()

    try:
        template_cfg = payload.get("template")
        if template_cfg is not None:
            tpl_map = _mapping(template_cfg, "template")
            if not tpl_map.get("name"):
                raise ConfigError("Missing required config field: template.name")
            name: str | RunSpecTemplate = RunSpecTemplate(
                name=str(tpl_map["name"]),
                required_sections=_names(
                    tpl_map.get("required_sections"), "template.required_sections"
                ),
            )
        elif payload.get("name"):
            name = str(payload["name"])
        else:
            raise ConfigError("Missing required config field: name or template")

        sets = Sets(**_mapping(payload.get("sets"), "sets"))
        mappings = Mappings(**_mapping(payload.get("mappings"), "mappings"))
        closure = ClosureSpec(**_mapping(payload.get("closure"), "closure"))
        scenario_cfg = _mapping(payload.get("scenario"), "scenario")
        scenario = ScenarioSpec(
            name=str(scenario_cfg.get("name") or "baseline"),
            shocks=_mapping(scenario_cfg.get("shocks"), "scenario.shocks"),
        )
        sections = _build_sections(payload.get("sections"), registry)
    except ValidationError as exc:
        raise ConfigError(f"Invalid run configuration: {exc}") from exc

    required = payload.get("required_sections")
    return build_spec(
        name,
        sets,
        mappings,
        sections,
        closure=closure,
        scenario=scenario,
        required_sections=None if required is None else _names(required, "required_sections"),
        allowed_sections=_names(payload.get("allowed_sections"), "allowed_sections"),
        required_nonempty=_names(payload.get("required_nonempty"), "required_nonempty"),
    )


def load_run_config(
    config_path: Path | str,
    registry: BlockRegistry | None = None,
) -> RunSpec:
    """Load a YAML run configuration and assemble its RunSpec."""
    path = Path(config_path)
    payload = yaml.safe_load(path.read_text(encoding="utf-8"))
    logger.info(f"Loaded run configuration from {path}")
    return build_spec_from_config(payload, registry=registry)
