"""Scenario files — task/resource batches stored as YAML or JSON."""

import json
from pathlib import Path

import yaml
from loguru import logger
from pydantic import BaseModel, Field

from broker.models.task import Task
from broker.models.resource import Resource


class Scenario(BaseModel):
    """A batch to schedule: the submitted tasks and the resource pool."""

    tasks: list[Task] = Field(default_factory=list)
    resources: list[Resource] = Field(default_factory=list)


def load_scenario(path: Path) -> Scenario:
    """Load a scenario from a .yaml/.yml or .json file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Scenario file not found: {path}")

    logger.info(f"Loading scenario from {path}")

    with open(path, "r") as f:
        if path.suffix.lower() in [".yaml", ".yml"]:
            data = yaml.safe_load(f) or {}
        elif path.suffix.lower() == ".json":
            data = json.load(f)
        else:
            raise ValueError(f"Unsupported scenario file format: {path.suffix}")

    scenario = Scenario.model_validate(data)
    logger.info(
        f"Scenario loaded: {len(scenario.tasks)} tasks, "
        f"{len(scenario.resources)} resources"
    )
    return scenario


def save_scenario(scenario: Scenario, path: Path) -> None:
    """Write a scenario; the format follows the file suffix."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in [".yaml", ".yml", ".json"]:
        raise ValueError(f"Unsupported scenario file format: {path.suffix}")

    path.parent.mkdir(parents=True, exist_ok=True)
    data = scenario.model_dump(mode="json")

    with open(path, "w") as f:
        if suffix == ".json":
            json.dump(data, f, indent=2)
        else:
            yaml.safe_dump(data, f, sort_keys=False)

    logger.info(f"Scenario saved to {path}")
