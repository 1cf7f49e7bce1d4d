"""
Сканер плейсхолдеров.

Находит в документе участки {{ ... }}, классифицирует их по виду директивы
и для блочных директив (IF, FOR) расширяет участок до парного закрывающего
тега с учётом вложенности блоков одного вида.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional

logger = logging.getLogger(__name__)

OPEN_DELIMITER = "{{"
CLOSE_DELIMITER = "}}"

# WYSIWYG-редакторы иногда вставляют сущность вместо пробела
_NBSP_ENTITY = "&nbsp;"


class DirectiveKind(Enum):
    """Виды директив внутри плейсхолдеров."""
    CONDITIONAL = "if"
    LOOP = "for"
    ASSIGNMENT = "set"
    IMPORT = "import"
    PIPELINE = "pipeline"


# Префиксы классификации проверяются по порядку
_KIND_PATTERNS = [
    (re.compile(r'^if\s+\S', re.IGNORECASE), DirectiveKind.CONDITIONAL),
    (re.compile(r'^for\s+\S', re.IGNORECASE), DirectiveKind.LOOP),
    (re.compile(r'^set\s+\S', re.IGNORECASE), DirectiveKind.ASSIGNMENT),
    (re.compile(r'^import\s+\S', re.IGNORECASE), DirectiveKind.IMPORT),
]

# Ключевые слова ветвей и закрытия; допускают скобку сразу после слова: {{elseif(x)}}
_BRANCH_KEYWORD_RE = re.compile(r'^(elseif|elsefor|else|endif|endfor)(?=[\s(]|$)', re.IGNORECASE)

# Закрывающие ключевые слова блочных директив
BLOCK_CLOSERS = {
    DirectiveKind.CONDITIONAL: "endif",
    DirectiveKind.LOOP: "endfor",
}


@dataclass(frozen=True)
class Tag:
    """
    Одиночный тег {{ ... }} без учёта блоков.

    Attributes:
        start: Позиция открывающего разделителя
        end: Позиция сразу после закрывающего разделителя
        inner: Нормализованное и обрезанное содержимое между разделителями
    """
    start: int
    end: int
    inner: str

    @property
    def keyword(self) -> str:
        """Первое слово тега в нижнем регистре (if, elseif, endfor, ...)."""
        m = _BRANCH_KEYWORD_RE.match(self.inner)
        if m:
            return m.group(1).lower()
        parts = self.inner.split(None, 1)
        return parts[0].lower() if parts else ""


@dataclass(frozen=True)
class Placeholder:
    """
    Найденный плейсхолдер.

    Attributes:
        text: Исходный текст участка, включая разделители
        directive: Обрезанный текст директивы; для блоков - весь блок с разделителями
        kind: Вид директивы
        start: Начало участка [start, end)
        end: Конец участка
        closed: False для блока без парного закрывающего тега
    """
    text: str
    directive: str
    kind: DirectiveKind
    start: int
    end: int
    closed: bool = True


def normalize_whitespace(text: str) -> str:
    """Заменяет сущности неразрывного пробела обычными пробелами."""
    return text.replace(_NBSP_ENTITY, " ")


def classify(inner: str) -> DirectiveKind:
    """
    Определяет вид директивы по синтаксическому префиксу.

    Args:
        inner: Обрезанное содержимое плейсхолдера без разделителей

    Returns:
        Вид директивы; всё, что не является блоком, присваиванием
        или импортом, считается конвейером
    """
    for pattern, kind in _KIND_PATTERNS:
        if pattern.match(inner):
            return kind
    return DirectiveKind.PIPELINE


def iter_tags(text: str, start: int = 0, end: Optional[int] = None) -> Iterator[Tag]:
    """
    Перебирает теги {{ ... }} в диапазоне текста.

    Открывающий разделитель без закрывающего пропускается.
    """
    limit = len(text) if end is None else end
    offset = start
    while offset < limit:
        pos1 = text.find(OPEN_DELIMITER, offset, limit)
        if pos1 == -1:
            return
        pos2 = text.find(CLOSE_DELIMITER, pos1 + len(OPEN_DELIMITER), limit)
        if pos2 == -1:
            return
        inner = normalize_whitespace(text[pos1 + len(OPEN_DELIMITER):pos2]).strip()
        yield Tag(start=pos1, end=pos2 + len(CLOSE_DELIMITER), inner=inner)
        offset = pos2 + len(CLOSE_DELIMITER)


def find_block_end(text: str, opener: Tag, kind: DirectiveKind) -> Optional[int]:
    """
    Ищет конец блока, начатого тегом opener, с учётом вложенности.

    Args:
        text: Исходный текст
        opener: Открывающий тег блока
        kind: Вид блока (CONDITIONAL или LOOP)

    Returns:
        Позицию сразу после парного закрывающего тега или None
    """
    closer = BLOCK_CLOSERS[kind]
    depth = 1
    for tag in iter_tags(text, opener.end):
        if classify(tag.inner) is kind:
            depth += 1
        elif tag.keyword == closer:
            depth -= 1
            if depth == 0:
                return tag.end
    return None


class PlaceholderScanner:
    """
    Сканер плейсхолдеров документа.

    Перезапускаемый и конечный: каждый вызов scan() проходит текст заново
    и возвращает упорядоченный список непересекающихся участков.
    """

    def scan(self, text: str) -> List[Placeholder]:
        """
        Находит и классифицирует плейсхолдеры.

        Args:
            text: Текст шаблона

        Returns:
            Список плейсхолдеров в порядке появления
        """
        placeholders: List[Placeholder] = []
        offset = 0

        while True:
            tag = next(iter_tags(text, offset), None)
            if tag is None:
                break

            kind = classify(tag.inner)
            end = tag.end
            closed = True

            if kind in BLOCK_CLOSERS:
                block_end = find_block_end(text, tag, kind)
                if block_end is None:
                    logger.debug(f"No closing '{BLOCK_CLOSERS[kind]}' for block at {tag.start}")
                    closed = False
                else:
                    end = block_end

            span = text[tag.start:end]
            if kind in BLOCK_CLOSERS:
                # Разделители сохраняются для разбора веток блока
                directive = normalize_whitespace(span).strip()
            else:
                directive = tag.inner

            placeholders.append(Placeholder(
                text=span,
                directive=directive,
                kind=kind,
                start=tag.start,
                end=end,
                closed=closed,
            ))
            offset = end

        logger.debug(f"Scanned text of length {len(text)} -> {len(placeholders)} placeholders")
        return placeholders


def scan_placeholders(text: str) -> List[Placeholder]:
    """Удобная функция для однократного сканирования."""
    return PlaceholderScanner().scan(text)


__all__ = [
    "OPEN_DELIMITER",
    "CLOSE_DELIMITER",
    "BLOCK_CLOSERS",
    "DirectiveKind",
    "Tag",
    "Placeholder",
    "PlaceholderScanner",
    "normalize_whitespace",
    "classify",
    "iter_tags",
    "find_block_end",
    "scan_placeholders",
]
