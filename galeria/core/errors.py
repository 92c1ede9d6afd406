"""Error hierarchy shared by services and translated to HTTP by app.py."""

from __future__ import annotations


class GaleriaError(Exception):
    """Base class; carries the user-facing message and the HTTP status."""

    status_code = 500
    default_message = "Error interno del servidor"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)
        if status_code is not None:
            self.status_code = status_code


class InvalidInputError(GaleriaError):
    status_code = 400
    default_message = "Datos de entrada invalidos"


class NotFoundError(GaleriaError):
    status_code = 404
    default_message = "Recurso no encontrado"


class ConflictError(GaleriaError):
    status_code = 400
    default_message = "El recurso ya existe"


class PayloadTooLargeError(GaleriaError):
    status_code = 413
    default_message = "El archivo excede el tamano maximo permitido"


class InternalFailureError(GaleriaError):
    status_code = 500


class StorageError(InternalFailureError):
    default_message = "Error al guardar los datos"
