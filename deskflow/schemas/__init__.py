"""
Pydantic Schemas
================

Request/response schemas for API validation.
"""

from deskflow.schemas.common import (
    BaseResponse,
    ErrorDetail,
    ErrorResponse,
)

__all__ = [
    "BaseResponse",
    "ErrorDetail",
    "ErrorResponse",
]
