"""
Доменные исключения ePharmacy.

Сервисы бросают их вместо HTTPException, обработчик в main.py
превращает их в JSON-ответ {"detail": message} с нужным статусом.
"""


class EPharmacyException(Exception):
    """
    Базовое исключение приложения.

    Attributes:
        message: Текст ошибки для клиента
        details: Дополнительный контекст (id сущностей и т.п.)
    """

    status_code = 400

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        if self.details:
            details_str = ', '.join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.__class__.__name__}('{self.message}', {details_str})"
        return f"{self.__class__.__name__}('{self.message}')"


class BadRequestError(EPharmacyException):
    """Некорректные данные запроса."""
    status_code = 400


class InvalidReferenceError(BadRequestError):
    """Ссылка на несуществующую сущность (категорию, бренд, ингредиент)."""

    def __init__(self, message: str, missing_ids: list[int] | None = None):
        details = {'missing_ids': missing_ids} if missing_ids else None
        super().__init__(message, details)
        self.missing_ids = missing_ids or []


class NotFoundError(EPharmacyException):
    """Целевая сущность не найдена."""
    status_code = 404

    def __init__(self, entity: str, entity_id: int | None = None):
        message = f"{entity} not found" if entity_id is None else f"{entity} {entity_id} not found"
        details = {'id': entity_id} if entity_id is not None else None
        super().__init__(message, details)
        self.entity = entity
        self.entity_id = entity_id


class ForbiddenError(EPharmacyException):
    """Действие запрещено для текущей роли."""
    status_code = 403
