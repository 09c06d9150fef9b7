"""
Configuration Manager
Handles loading and validating configuration for the checker and runners.
"""

import copy
import json
from pathlib import Path
from typing import Dict, Any, Optional


class ConfigManager:
    """
    Manages configuration loading and validation.
    Provides defaults for missing values.
    """

    # Default configuration values
    DEFAULTS = {
        'files': {
            'base_dir': '.',
            'active': 'working_domains.txt',
            'inactive': 'inactive_domains.txt',
            'allowlist': 'allowlist.txt'
        },
        'dns': {
            'concurrency': 10,
            'timeout': 3.0,  # seconds per probe
            'retries': 1,  # transient errors only
            'record_types': ['A'],
            'nameservers': [],  # empty = system resolver
            'progress_every': 100
        },
        'batch': {
            'update_size': 1000,
            'retest_size': 2500
        }
    }

    def __init__(self, config_file: Optional[str] = None, quiet: bool = False):
        """
        Initialize configuration.

        Args:
            config_file: Path to config.json (optional, uses defaults if not provided)
            quiet: Suppress the [CONFIG] status line
        """
        self.config_file = Path(config_file) if config_file else None
        self.quiet = quiet
        self.config = self._load_config()

    def _load_config(self) -> Dict:
        """Load configuration, merging with defaults"""
        if self.config_file and self.config_file.exists():
            # Try different encodings (handles Windows BOM issues)
            encodings = ['utf-8-sig', 'utf-8', 'utf-16', 'latin-1']
            user_config = None

            for encoding in encodings:
                try:
                    with open(self.config_file, 'r', encoding=encoding) as f:
                        user_config = json.load(f)
                    break
                except (UnicodeDecodeError, UnicodeError):
                    continue
                except json.JSONDecodeError as e:
                    raise ValueError(f"Invalid JSON in config file: {e}")

            if user_config is None:
                raise ValueError(f"Could not decode config file with any supported encoding")

            if not isinstance(user_config, dict):
                raise ValueError(f"Config file must contain a JSON object: {self.config_file}")

            config = self._deep_merge(copy.deepcopy(self.DEFAULTS), user_config)
            self._status(f"[CONFIG] Loaded: {self.config_file}")
        else:
            config = copy.deepcopy(self.DEFAULTS)
            if self.config_file:
                self._status(f"[CONFIG] File not found, using defaults: {self.config_file}")

        return config

    def _status(self, message: str):
        if not self.quiet:
            print(message)

    def _deep_merge(self, base: Dict, override: Dict) -> Dict:
        """
        Deep merge two dictionaries.
        Override values take precedence.
        """
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def get(self, *keys, default: Any = None) -> Any:
        """
        Get nested configuration value.

        Args:
            *keys: Path to config value (e.g., 'dns', 'concurrency')
            default: Default value if path not found

        Returns:
            Configuration value or default
        """
        value = self.config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def set(self, *keys_and_value):
        """Set a nested value: set('files', 'base_dir', '/data')"""
        *keys, value = keys_and_value
        target = self.config
        for key in keys[:-1]:
            target = target.setdefault(key, {})
        target[keys[-1]] = value

    def get_dns_config(self) -> Dict:
        """Get DNS checker configuration"""
        return self.config.get('dns', self.DEFAULTS['dns'])

    def get_files_config(self) -> Dict:
        """Get list file configuration"""
        return self.config.get('files', self.DEFAULTS['files'])

    def get_batch_config(self) -> Dict:
        """Get batch size configuration"""
        return self.config.get('batch', self.DEFAULTS['batch'])

    def save_template(self, output_path: str) -> Path:
        """Save default configuration as template"""
        output = Path(output_path)
        output.parent.mkdir(parents=True, exist_ok=True)

        with open(output, 'w', encoding='utf-8') as f:
            json.dump(self.DEFAULTS, f, indent=2)

        self._status(f"[CONFIG] Template saved: {output}")
        return output


def create_config_template(output_path: str = "./config.json") -> str:
    """Create a configuration template file"""
    manager = ConfigManager()
    manager.save_template(output_path)
    return output_path
