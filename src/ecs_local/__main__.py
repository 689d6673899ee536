"""Allow ``python -m ecs_local``."""

from ecs_local.cli.main import main

main()
