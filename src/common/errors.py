"""
Ошибки пайплайна импорта рецептов
"""


class ImportFailure(Exception):
    """Базовая ошибка импорта одного URL (батч при этом продолжается)"""

    def __init__(self, reason: str, url: str = ''):
        self.url = url
        self.reason = reason
        super().__init__(reason)


class FetchError(ImportFailure):
    """Ошибка получения страницы: не 2xx, таймаут, сетевая ошибка"""
    pass


class ExtractionError(ImportFailure):
    """На странице нет JSON-LD или в нем нет объекта Recipe"""
    pass


class RecipeValidationError(ImportFailure):
    """Рецепт без названия или без ингредиентов"""
    pass


class FetchBoundaryUnavailable(Exception):
    """Сервис получения страниц не отвечает на health check"""
    def __init__(self, endpoint: str):
        self.endpoint = endpoint
        self.message = f"Сервис получения страниц недоступен: {endpoint}"
        super().__init__(self.message)


class LibraryError(Exception):
    """Файл библиотеки рецептов отсутствует или не читается"""
    pass
