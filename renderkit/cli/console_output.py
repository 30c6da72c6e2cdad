# renderkit/cli/console_output.py
"""
Console presentation of compiled template sets for the CLI.
"""
from pathlib import PurePosixPath
from typing import Any, Dict, Iterable, List

from rich.console import Console as RichConsole
from rich.table import Table
import structlog

log = structlog.get_logger(__name__)

def build_name_tree(names: Iterable[str], root_label: str) -> str:
    """Generates a text-based directory tree from slash-separated template names."""
    names = list(names)
    if not names: return f"{root_label}/\n(no templates compiled.)"

    tree_structure_dict: Dict[str, Any] = {}
    for name in sorted(names, key=str.lower):
        current_dict_level = tree_structure_dict
        parts = PurePosixPath(name).parts
        for i, part_name in enumerate(parts):
            is_last_part_of_path = (i == len(parts) - 1)
            node_data = current_dict_level.setdefault(part_name, {"_type_": "template" if is_last_part_of_path else "dir", "_children_": {}})
            if not is_last_part_of_path:
                # a template and a directory may share a name, e.g. "users" and "users/show".
                if node_data["_type_"] == "template": node_data["_type_"] = "both"
                current_dict_level = node_data["_children_"]
            elif node_data["_type_"] == "dir":
                node_data["_type_"] = "both"

    def format_tree_nodes_recursively(node_dict_level: Dict[str, Any], indent_str: str = "") -> List[str]:
        output_lines: List[str] = []
        item_names_to_display = sorted(node_dict_level, key=str.lower)

        for i, item_name in enumerate(item_names_to_display):
            item_data = node_dict_level[item_name]
            is_last_item_at_this_level = i == len(item_names_to_display) - 1
            connector_str = "└── " if is_last_item_at_this_level else "├── "
            label = item_name + "/" if item_data["_type_"] == "dir" else item_name
            output_lines.append(f"{indent_str}{connector_str}{label}")

            if item_data["_children_"]:
                new_indent_str = indent_str + ("    " if is_last_item_at_this_level else "│   ")
                output_lines.extend(format_tree_nodes_recursively(item_data["_children_"], new_indent_str))
        return output_lines

    return "\n".join([f"{root_label}/"] + format_tree_nodes_recursively(tree_structure_dict))

def print_template_table(names: List[str], root_label: str, console: RichConsole) -> None:
    table = Table(title=f"templates in {root_label}", show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("name", style="cyan")
    for i, name in enumerate(names, start=1):
        table.add_row(str(i), name)
    console.print(table)
    log.debug("template_table_printed", count=len(names))
