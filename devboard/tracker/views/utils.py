# ============================================
# tracker/views/utils.py
# ============================================
"""
drf-spectacular helpers shared by the tracker views: path/query parameter
builders, the ``{"detail": ...}`` error schema and response mappings.
"""
from drf_spectacular.utils import (
    extend_schema, OpenApiParameter, OpenApiResponse, inline_serializer,
)
from drf_spectacular.types import OpenApiTypes
from rest_framework import serializers, status
from rest_framework.response import Response

__all__ = [
    "extend_schema", "OpenApiParameter", "OpenApiResponse", "OpenApiTypes",
    "inline_serializer", "ErrorSerializer", "path_int", "path_str", "q_int",
    "q_str", "q_bool", "responses_ok", "std_errors", "CONFLICT", "not_found",
]

# Every error body produced by api_exception_handler
ErrorSerializer = inline_serializer(
    name="Error",
    fields={"detail": serializers.CharField()}
)


def _param(name, kind, location, description, required=False):
    return OpenApiParameter(name, kind, location, required=required, description=description)


def path_int(name: str, description: str):
    return _param(name, OpenApiTypes.INT, OpenApiParameter.PATH, description, required=True)


def path_str(name: str, description: str):
    return _param(name, OpenApiTypes.STR, OpenApiParameter.PATH, description, required=True)


def q_int(name: str, description: str, required: bool = False):
    return _param(name, OpenApiTypes.INT, OpenApiParameter.QUERY, description, required)


def q_str(name: str, description: str, required: bool = False):
    return _param(name, OpenApiTypes.STR, OpenApiParameter.QUERY, description, required)


def q_bool(name: str, description: str, required: bool = False):
    return _param(name, OpenApiTypes.BOOL, OpenApiParameter.QUERY, description, required)


def responses_ok(serializer_cls, many: bool = False, description: str | None = None, extra: dict | None = None, code: int = 200):
    """{code: serializer} mapping, merged with ``extra`` error responses."""
    serializer = serializer_cls(many=many) if isinstance(serializer_cls, type) else serializer_cls
    mapping = {code: OpenApiResponse(response=serializer, description=description or "OK")}
    if extra:
        mapping.update(extra)
    return mapping


def std_errors(extra: dict | None = None):
    errs = {
        status.HTTP_400_BAD_REQUEST: OpenApiResponse(ErrorSerializer, description="Invalid input"),
        status.HTTP_401_UNAUTHORIZED: OpenApiResponse(ErrorSerializer, description="Not authenticated"),
        status.HTTP_403_FORBIDDEN: OpenApiResponse(ErrorSerializer, description="Not a member / not allowed"),
        status.HTTP_404_NOT_FOUND: OpenApiResponse(ErrorSerializer, description="Not found"),
    }
    if extra:
        errs.update(extra)
    return errs


CONFLICT = {
    status.HTTP_409_CONFLICT: OpenApiResponse(ErrorSerializer, description="Concurrent update, retry"),
}


def not_found(what: str) -> Response:
    return Response({"detail": f"{what} not found"}, status=status.HTTP_404_NOT_FOUND)
