"""
Клиент сервиса получения HTML страниц рецептов.

Сам сервис (allow-list доменов, HTTPS, таймауты, rate limit) внешний,
здесь только вызовы его HTTP API.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import requests

from config.config import config
from src.common.errors import FetchError

logger = logging.getLogger(__name__)

HEALTH_TIMEOUT = 5


@dataclass
class FetchResult:
    html: str
    url: str
    status: int


class FetchClient:
    """Клиент для POST {endpoint}/api/fetch-recipe"""

    def __init__(self, endpoint: Optional[str] = None, timeout: Optional[int] = None,
                 session: Optional[requests.Session] = None):
        """
        Args:
            endpoint: базовый URL сервиса (по умолчанию из конфигурации)
            timeout: таймаут запроса в секундах (по умолчанию из конфигурации)
        """
        self.endpoint = (endpoint or config.FETCH_ENDPOINT).rstrip('/')
        self.timeout = timeout or config.FETCH_TIMEOUT
        self.session = session or requests.Session()

    def health_check(self) -> bool:
        """Проверка, что сервис запущен"""
        try:
            response = self.session.get(f"{self.endpoint}/health", timeout=HEALTH_TIMEOUT)
            return response.ok
        except requests.exceptions.RequestException as e:
            logger.debug(f"Health check {self.endpoint} не прошел: {e}")
            return False

    def fetch(self, url: str) -> FetchResult:
        """
        Получение HTML страницы

        Raises:
            FetchError: не 2xx ответ, таймаут или сетевая ошибка
        """
        try:
            response = self.session.post(
                f"{self.endpoint}/api/fetch-recipe",
                json={'url': url},
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise FetchError(f"Timeout: {e}", url) from e
        except requests.exceptions.RequestException as e:
            raise FetchError(f"Network error: {e}", url) from e

        if not response.ok:
            try:
                payload = response.json()
            except ValueError:
                payload = None
            error = payload.get('error') if isinstance(payload, dict) else None
            raise FetchError(error or f"HTTP {response.status_code}", url)

        try:
            data = response.json()
        except ValueError as e:
            raise FetchError(f"Invalid response from fetch service: {e}", url) from e

        if not isinstance(data, dict) or not data.get('success') or not data.get('html'):
            raise FetchError('Failed to fetch HTML', url)

        return FetchResult(
            html=data['html'],
            url=data.get('url') or url,
            status=int(data.get('status') or response.status_code),
        )
