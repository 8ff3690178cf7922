# sales/api/errors.py

"""
API ERROR NORMALIZATION

Every checkout-related failure is returned as:
    {"error": {"code": "...", "message": "...", "retryable": false}}
"""

from rest_framework.response import Response


def error_response(*, code: str, message: str, http_status: int, retryable: bool = False):
    return Response(
        {"error": {"code": code, "message": message, "retryable": retryable}},
        status=http_status,
    )
