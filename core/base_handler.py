"""
BaseHandler - базовый класс для handler'ов фазы анализа.

Handler получает dict-контекст, читает свои requires и дописывает provides:
handle(context) -> context. Контракт проверяется до вызова handle().
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, FrozenSet

from models.keys import Key


class BaseHandler(ABC):
    """Base handler interface с контрактом requires/provides.

    Атрибуты класса:
        requires: ключи, которые handler требует (FrozenSet[Key])
        provides: ключи, которые handler создаёт (FrozenSet[Key])
    """

    requires: ClassVar[FrozenSet[Key]] = frozenset()
    provides: ClassVar[FrozenSet[Key]] = frozenset()

    @property
    def name(self) -> str:
        """Имя handler'а (по умолчанию имя класса)."""
        return self.__class__.__name__

    def missing_requirements(self, context: dict[str, Any]) -> list[str]:
        """Возвращает список отсутствующих в контексте requires."""
        return [
            f"Handler '{self.name}' missing required key: {key.value}"
            for key in sorted(self.requires, key=lambda k: k.value)
            if key.value not in context
        ]

    def __call__(self, context: dict[str, Any]) -> dict[str, Any]:
        errors = self.missing_requirements(context)
        if errors:
            raise ValueError("; ".join(errors))
        return self.handle(context)

    @abstractmethod
    def handle(self, context: dict[str, Any]) -> dict[str, Any]:
        """Обрабатывает контекст и возвращает обновлённый контекст."""
        raise NotImplementedError


class ExtractorHandler(BaseHandler):
    """Базовый класс для Extractor handlers (I/O, пробинг медиа)."""
    pass


class AnalyzerHandler(BaseHandler):
    """Базовый класс для Analyzer handlers (чистая аналитика по событиям)."""
    pass
