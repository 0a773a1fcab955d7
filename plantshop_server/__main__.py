"""Allow running as python -m plantshop_server."""

from .cli import main

main()
