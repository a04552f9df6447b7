"""Domain layer — rule expression types and evaluators.

This layer depends only on stdlib, pydantic and python-dateutil.
It must never import from services, commands, output, or config.
"""
