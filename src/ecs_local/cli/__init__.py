"""ecs-local command line interface."""
