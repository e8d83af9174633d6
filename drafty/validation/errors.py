from __future__ import annotations


class DraftyValidationError(ValueError):
    code = "invalid_document"

    def __init__(self, message: str, *, index: int | None = None):
        super().__init__(message)
        self.message = message
        self.index = index

    def as_detail(self) -> dict[str, object]:
        detail: dict[str, object] = {"code": self.code, "message": self.message}
        if self.index is not None:
            detail["index"] = self.index
        return detail


class TypeMismatchError(DraftyValidationError):
    code = "type_mismatch"


class NegativeLengthError(DraftyValidationError):
    code = "negative_length"


class OutOfBoundsError(DraftyValidationError):
    code = "out_of_bounds"


class DanglingEntityReferenceError(DraftyValidationError):
    code = "dangling_entity_reference"


class InvalidEntityDataError(DraftyValidationError):
    code = "invalid_entity_data"
