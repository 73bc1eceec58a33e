"""Allow ``python -m kasa_cloud_cli``."""

from .cli import app

app(prog_name="kasactl")
