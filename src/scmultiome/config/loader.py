"""
Configuration loader with YAML support and Pydantic validation
"""
from pathlib import Path
from typing import Optional, Union

import yaml
from rich.console import Console
from rich.markup import escape

from .schema import AppConfig, DataConfig

console = Console(stderr=True)


def load_yaml(path: Union[str, Path]) -> dict:
    """Load YAML file"""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    return data or {}


def load_config(config_path: Union[str, Path], quiet: bool = False) -> AppConfig:
    """
    Load and validate configuration from YAML file

    Relative data paths are resolved against the directory holding the
    config file, so a config can travel with its data.

    Args:
        config_path: Path to config file
        quiet: Suppress console messages

    Returns:
        Validated AppConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValidationError: If config validation fails
    """
    config_path = Path(config_path)

    if not quiet:
        console.print(f"[dim]Loading config: {config_path}[/dim]")

    config_dict = load_yaml(config_path)

    try:
        config = AppConfig(**config_dict)
    except Exception as e:
        if not quiet:
            console.print(f"[red]✗ Config validation failed:[/red] {escape(str(e))}")
        raise

    base = config_path.resolve().parent
    data = config.data
    config = config.model_copy(
        update={
            "data": DataConfig(
                matrix_dir=_resolve(base, data.matrix_dir),
                gtf_path=_resolve(base, data.gtf_path),
            ),
            "output_dir": _resolve(base, config.output_dir),
        }
    )

    if not quiet:
        console.print("[green]✓[/green] Config validated successfully")
    return config


def _resolve(base: Path, path: Path) -> Path:
    return path if path.is_absolute() else base / path


def default_config(
    matrix_dir: Union[str, Path],
    gtf_path: Union[str, Path],
    output_dir: Optional[Union[str, Path]] = None,
) -> AppConfig:
    """Build a config with default settings for the given inputs"""
    config = AppConfig(data=DataConfig(matrix_dir=matrix_dir, gtf_path=gtf_path))
    if output_dir is not None:
        config.output_dir = Path(output_dir)
    return config


def save_config(config: AppConfig, path: Union[str, Path], quiet: bool = False) -> None:
    """
    Save config to YAML file

    Args:
        config: AppConfig instance
        path: Output path
        quiet: Suppress console messages
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    config_dict = config.model_dump(mode="json")

    with open(path, "w") as f:
        yaml.safe_dump(config_dict, f, default_flow_style=False, sort_keys=False)

    if not quiet:
        console.print(f"[green]✓[/green] Config saved: {path}")
