"""Service layer — wraps the domain evaluators in ServiceResult for the CLI."""
