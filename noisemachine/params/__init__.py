"""
Request schema, defaults and validation.
"""
from noisemachine.params.schema import PARAM_SCHEMA, DEFAULT_REQUEST, MAX_DURATION_S
from noisemachine.params.resolve import resolve_request, validate_request

__all__ = ["PARAM_SCHEMA", "DEFAULT_REQUEST", "MAX_DURATION_S", "resolve_request", "validate_request"]
