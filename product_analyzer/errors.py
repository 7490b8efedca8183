"""Tagged application errors — every failure below the service ends up as one of these."""
from enum import Enum

from product_analyzer.constants import (
    ERR_PREFIX_API,
    ERR_PREFIX_GENERAL,
    ERR_PREFIX_IMAGE,
    MSG_ERR_PNG_ENCODE,
)


class ErrorKind(Enum):
    IMAGE = "image"
    API = "api"
    GENERAL = "general"


class AppError(Exception):
    kind: ErrorKind = ErrorKind.GENERAL
    prefix: str = ERR_PREFIX_GENERAL

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.prefix}: {self.message}"


class ImageLoadingError(AppError):
    kind = ErrorKind.IMAGE
    prefix = ERR_PREFIX_IMAGE


class ImageEncodingError(ImageLoadingError):

    def __init__(self, image_id: str) -> None:
        super().__init__(MSG_ERR_PNG_ENCODE % image_id)
        self.image_id = image_id


class ApiError(AppError):
    kind = ErrorKind.API
    prefix = ERR_PREFIX_API


class GeneralError(AppError):
    kind = ErrorKind.GENERAL
    prefix = ERR_PREFIX_GENERAL
