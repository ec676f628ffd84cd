"""
CLI Configuration Manager for the patron CLI
Manages user preferences such as the default data file and output mode
"""

import copy
import json
from pathlib import Path
from typing import Dict, Any, Optional
from rich.console import Console
from rich.tree import Tree

from lms.config import settings

console = Console()

DEFAULT_CONFIG: Dict[str, Any] = {
    "preferences": {
        "default_file": None,
        "output_mode": "plain",
    },
    "ui_settings": {
        "confirm_deletions": True,
        "show_emojis": True,
    },
}


class CLIConfig:
    """Manages CLI configuration and user preferences."""

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = Path(config_dir) if config_dir else settings.config_dir
        self.config_file = self.config_dir / "config.json"
        self.config: Dict[str, Any] = {}
        self.load_config()

    def load_config(self) -> None:
        """Load configuration from file, falling back to defaults in memory."""
        if self.config_file.exists():
            try:
                with open(self.config_file, 'r', encoding='utf-8') as f:
                    loaded = json.load(f)
                if isinstance(loaded, dict):
                    self.config = loaded
                    return
                console.print(f"[yellow]⚠️  Ignoring config: {self.config_file} does not hold a JSON object[/]")
            except (OSError, ValueError) as e:
                console.print(f"[yellow]⚠️  Could not load config: {e}[/]")
        self.config = copy.deepcopy(DEFAULT_CONFIG)

    def save_config(self) -> bool:
        """Save current configuration to file."""
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, 'w', encoding='utf-8') as f:
                json.dump(self.config, f, indent=2, ensure_ascii=False)
            return True
        except OSError as e:
            console.print(f"[red]❌ Could not save config: {e}[/]")
            return False

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation (e.g., 'preferences.default_file')."""
        value = self.config

        for k in key.split('.'):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any) -> None:
        """Set configuration value using dot notation."""
        keys = key.split('.')
        config = self.config

        # Navigate to the parent dictionary
        for k in keys[:-1]:
            if not isinstance(config.get(k), dict):
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value
        self.save_config()

    def reset_to_default(self) -> None:
        """Reset configuration to default values."""
        self.config = copy.deepcopy(DEFAULT_CONFIG)
        self.save_config()
        console.print("[green]✅ Configuration reset to default values[/]")

    def show_config(self) -> None:
        """Display current configuration."""
        tree = Tree("📄 Patron CLI Configuration", style="bold blue")

        for section, values in self.config.items():
            section_tree = tree.add(f"[bold cyan]{section.title()}[/]")
            if isinstance(values, dict):
                for key, value in values.items():
                    section_tree.add(f"[yellow]{key}[/]: [white]{value}[/]")
            else:
                section_tree.add(f"[white]{values}[/]")

        console.print(tree)
        console.print(f"\n[dim]Config file: {self.config_file}[/]")


def parse_config_value(value: str) -> Any:
    """Convert a command-line string into the bool/int/float/None it spells."""
    lowered = value.lower()
    if lowered in ('true', 'false'):
        return lowered == 'true'
    if lowered in ('none', 'null'):
        return None
    if value.isdecimal():
        return int(value)
    if value.replace('.', '', 1).isdecimal():
        return float(value)
    return value
