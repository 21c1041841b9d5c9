"""
Pydantic schema definitions.

The user entity, its input payloads and the paginated result wrapper
are defined here.  Request models for the HTTP layer extend the input
payloads with format validation so that the service and repository
layers stay free of transport concerns.
"""
