"""Generate command for creating a default config."""

import logging
from pathlib import Path

import yaml

from ..models.mdtasks_config import MdtasksConfig
from .output import info, success

logger = logging.getLogger(__name__)

CONFIG_FILE = "mdtasks.yml"

# Header comments for generated file
CONFIG_HEADER = """\
# mdtasks Configuration
#
# metadata_format: Preferred inline metadata syntax
#   - tasks:    emoji markers (📅 2025-03-01, ⏫, 🔁 every week)
#   - dataview: inline fields ([due:: 2025-03-01], [priority:: high])
#   The other syntax is still read as a fallback.
#
# statuses:
#   cycle: Ordered statuses; sort rank follows this order
#   exclude_from_cycle: Status names left out of the sort rank
#   task_statuses: Marker groups; values may be lists or "x|X" strings
#     - 'completed' markers mark a task done and sort it last
#     - 'abandoned' markers sort after completed tasks
#
# sort:
#   criteria: Applied in order; fields are status, priority, due_date,
#     scheduled_date, start_date and content. An empty list sorts by
#     priority, then scheduled or due date.
#
# daily_notes:
#   Infer a date for tasks in daily notes from the file name, e.g.
#     enabled: true
#     format: YYYY-MM-DD
#     path: Journal
#     use_as_date_type: due

"""


def generate_config_yaml() -> str:
    """Generate YAML config from the default MdtasksConfig model.

    Uses MdtasksConfig.default() as the single source of truth, so the
    generated file always matches internal defaults.
    """
    config_dict = MdtasksConfig.default().model_dump()
    yaml_content = yaml.dump(
        config_dict, default_flow_style=False, sort_keys=False, allow_unicode=True
    )
    return CONFIG_HEADER + yaml_content


def run_generate(project_root: Path, write: bool = False) -> int:
    """
    Generate default configuration.

    Args:
        project_root: Directory where mdtasks.yml is written
        write: Write mdtasks.yml instead of printing to stdout

    Returns:
        Exit code (0 = success, 1 = nothing to do)
    """
    content = generate_config_yaml()
    if not write:
        print(content, end="")
        return 0

    config_path = project_root / CONFIG_FILE
    if config_path.exists():
        info(f"Config exists: {config_path}")
        return 1

    project_root.mkdir(parents=True, exist_ok=True)
    config_path.write_text(content)
    logger.info(f"Wrote default config to {config_path}")
    success(f"Generated config: {config_path}")
    return 0
