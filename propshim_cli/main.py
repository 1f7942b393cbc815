import os
import typer
from pathlib import Path
from typing import Optional

from propshim.config import Config, TRUST_FLAG_ENV, TRUST_FLAG_PATH, trust_flag_from_config


# Create the main Typer application object
app = typer.Typer(
    name="propshim",
    help="Developer tools for the propshim props envelope and equivalence engine.",
    add_completion=False
)

CONFIG_FILE_NAME = "propshim.yaml"

CONFIG_TEMPLATE = """\
# propshim configuration
props:
  # Treat callbacks with identical code as equivalent without checking what
  # they are bound to. Unsafe outside test harnesses; leave off in apps.
  trust_homogeneous_origin: false
"""


@app.command()
def config(
    file: Optional[Path] = typer.Option(
        None, "--file", "-f",
        help="YAML config file to read instead of the default lookup.",
    ),
):
    """
    Shows where configuration was loaded from and the effective
    trust_homogeneous_origin setting.
    """
    if file is not None:
        if not file.exists():
            print(f"❌ Error: Config file not found at '{file}'")
            raise typer.Exit(code=1)
        Config.reset()
        cfg = Config(config_file=str(file.resolve()), prefer_embedded=False)
    else:
        cfg = Config()

    print(f"📄 Source: {cfg.source or 'none (defaults)'}")
    if cfg.resolved_config_path:
        print(f"   Path:   {cfg.resolved_config_path}")
    effective = trust_flag_from_config(cfg)
    print(f"🔧 {TRUST_FLAG_PATH} = {str(effective).lower()}")
    if TRUST_FLAG_ENV in os.environ:
        print(f"   (overridden by ${TRUST_FLAG_ENV})")


@app.command()
def init(
    directory: Path = typer.Argument(
        Path("."),
        help="Directory to write propshim.yaml into.",
        show_default=True,
    ),
):
    """
    Writes a starter propshim.yaml.
    """
    target = directory / CONFIG_FILE_NAME
    if target.exists():
        print(f"❌ Error: '{target}' already exists.")
        raise typer.Exit(code=1)

    try:
        directory.mkdir(parents=True, exist_ok=True)
        target.write_text(CONFIG_TEMPLATE, encoding="utf-8")
    except OSError as e:
        print(f"❌ An error occurred while writing the config:")
        print(e)
        raise typer.Exit(code=1)

    print(f"✅ Wrote {target}")


if __name__ == "__main__":
    app()
