"""
Output Formatting Module for the arcnft CLI

Renders command results as tables, JSON or YAML.
"""

import json
import sys
from enum import Enum
from typing import Any, Dict, List, Optional

import yaml
from tabulate import tabulate

OUTPUT_FORMATS = ['table', 'json', 'yaml']


class OutputFormatter:
    """Universal output formatter for CLI results."""

    def __init__(self, format_type: str = 'table', color_output: bool = True):
        """
        Initialize output formatter.

        Args:
            format_type: Output format (table, json, yaml)
            color_output: Enable colored output when writing to a terminal
        """
        if format_type not in OUTPUT_FORMATS:
            raise ValueError(f"Unknown output format: {format_type}")
        self.format_type = format_type
        self.color_output = color_output and sys.stdout.isatty()

    def format(self, data: Any, headers: Optional[List[str]] = None) -> str:
        """Format data according to the configured format type."""
        if self.format_type == 'json':
            return self.format_json(data)
        elif self.format_type == 'yaml':
            return self.format_yaml(data)
        else:
            return self.format_table(data, headers)

    def format_json(self, data: Any) -> str:
        return json.dumps(data, indent=2, default=self._json_encoder)

    def format_yaml(self, data: Any) -> str:
        # Round-trip through JSON so enums and other objects become plain values
        plain = json.loads(self.format_json(data))
        return yaml.safe_dump(plain, default_flow_style=False, sort_keys=False).rstrip()

    def format_table(self, data: Any, headers: Optional[List[str]] = None) -> str:
        """Format data as a table; nested dictionaries are drawn as a tree."""
        if isinstance(data, dict):
            if any(isinstance(v, (dict, list)) for v in data.values()):
                return format_tree(data)
            table_data = [[self._colorize(str(k), 'key'), self._format_value(v)]
                          for k, v in data.items()]
            return tabulate(table_data, tablefmt='plain')
        elif isinstance(data, list):
            if not data:
                return "No data available"
            if isinstance(data[0], dict):
                if headers is None:
                    headers = list(data[0].keys())
                rows = [[self._format_value(item.get(h, '')) for h in headers] for item in data]
                return tabulate(rows, headers=[self._colorize(h, 'header') for h in headers],
                                tablefmt='grid')
            return '\n'.join(str(item) for item in data)
        return str(data)

    def _format_value(self, value: Any) -> str:
        """Format individual value for display."""
        if value is None:
            return self._colorize('null', 'null')
        elif isinstance(value, bool):
            return self._colorize('true' if value else 'false', 'bool')
        elif isinstance(value, (int, float)):
            return self._colorize(str(value), 'number')
        elif isinstance(value, Enum):
            return str(value.value)
        return str(value)

    def _colorize(self, text: str, color_type: str) -> str:
        """Add color to text if color output is enabled."""
        if not self.color_output:
            return text

        colors = {
            'header': '\033[1;34m',
            'key': '\033[1;36m',
            'number': '\033[33m',
            'bool': '\033[35m',
            'null': '\033[90m',
        }
        color = colors.get(color_type, '')
        return f"{color}{text}\033[0m" if color else text

    def _json_encoder(self, obj):
        """Custom JSON encoder for special types."""
        if isinstance(obj, Enum):
            return obj.value
        elif isinstance(obj, bytes):
            return obj.hex()
        elif hasattr(obj, 'to_dict'):
            return obj.to_dict()
        return str(obj)


def format_tree(data: Dict[str, Any], indent: str = "") -> str:
    """
    Format nested data as a tree structure.

    Args:
        data: Nested dictionary data
        indent: Current indentation

    Returns:
        Formatted tree string
    """
    lines = []
    items = list(data.items())

    for i, (key, value) in enumerate(items):
        is_last_item = i == len(items) - 1
        prefix = "" if indent == "" else ("└── " if is_last_item else "├── ")
        extension = "    " if is_last_item else "│   "

        lines.append(f"{indent}{prefix}{key}")

        if isinstance(value, dict):
            if value:
                lines.append(format_tree(value, indent + extension))
        elif isinstance(value, list):
            for j, item in enumerate(value):
                item_prefix = "└── " if j == len(value) - 1 else "├── "
                if isinstance(item, dict):
                    lines.append(f"{indent}{extension}{item_prefix}[{j}]")
                    lines.append(format_tree(item, indent + extension + "    "))
                else:
                    lines.append(f"{indent}{extension}{item_prefix}{item}")
        else:
            lines[-1] += f": {value}"

    return '\n'.join(lines)


__all__ = [
    'OUTPUT_FORMATS',
    'OutputFormatter',
    'format_tree',
]
