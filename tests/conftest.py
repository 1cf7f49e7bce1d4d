from dataclasses import dataclass, field
from pathlib import Path
from typing import List

import pytest

from hte.engine import TemplateEngine
from hte.sources import FileTemplateSource


@dataclass
class Customer:
    """Непрозрачная модель для тестов привязки по имени класса."""
    id: int = 123
    name: str = "John Doe"
    email: str = "john.doe@example.com"
    datetime_created: str = "2024-03-15 14:30:00"
    tags: List[str] = field(default_factory=lambda: ["vip", "b2b"])

    def secret(self):
        return "must not be reachable"


class Order:
    """Модель, у которой ленивое свойство падает при чтении."""
    id = 7

    @property
    def total(self):
        raise RuntimeError("lazy load failed")


def write(p: Path, text: str) -> Path:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8", newline="\n")
    return p


@pytest.fixture
def engine() -> TemplateEngine:
    return TemplateEngine()


@pytest.fixture
def customer() -> Customer:
    return Customer()


@pytest.fixture
def broken_order() -> Order:
    return Order()


@pytest.fixture
def templates(tmp_path: Path) -> Path:
    """Каталог шаблонов: заголовок, счёт и вложенный каталог с частями."""
    root = tmp_path / "templates"
    write(root / "header.html", "<h1>{{ title }}</h1>")
    write(root / "_invoice.html", "Supplier: {{ supplier.name }}")
    write(root / "parts" / "total.html", "{{ set shown = 1 }}Total: {{ total }}")
    return root


@pytest.fixture
def file_engine(templates: Path) -> TemplateEngine:
    source = FileTemplateSource(root=templates, aliases={"templates": templates})
    return TemplateEngine(source=source)
