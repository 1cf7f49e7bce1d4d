from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Optional

from .config import EngineConfig, find_config, load_config, read_yaml_map
from .engine import ForceReplace, TemplateEngine
from .errors import HTEUserError, TemplateNotFoundError
from .report import build_render_report, build_scan_report, dumps
from .scanner import scan_placeholders
from .sources import is_reference
from .version import tool_version

_LOG = logging.getLogger("hte")


def _setup_logging() -> None:
    if getattr(_setup_logging, "_inited", False):
        return
    _setup_logging._inited = True  # type: ignore[attr-defined]
    level = logging.DEBUG if os.environ.get("HTE_DEBUG") else logging.WARNING
    _LOG.setLevel(level)
    if not _LOG.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        _LOG.addHandler(h)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="hte",
        description="HTML templating engine: placeholders, IF/FOR/SET blocks and directive pipelines",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    sub = p.add_subparsers(dest="cmd", required=True)

    def add_template(sp: argparse.ArgumentParser) -> None:
        sp.add_argument(
            "template",
            help="путь к шаблону, '-' для чтения из stdin или ссылка '@alias/path'",
        )
        sp.add_argument(
            "--config",
            metavar="FILE",
            help="файл конфигурации (по умолчанию ./hte.yaml, если есть)",
        )
        sp.add_argument(
            "--root",
            metavar="DIR",
            help="корень шаблонов для {{ import }} (переопределяет template_root)",
        )

    def add_render_opts(sp: argparse.ArgumentParser) -> None:
        sp.add_argument(
            "--data",
            metavar="FILE",
            help="значения для подстановки: YAML или JSON словарь",
        )
        sp.add_argument(
            "--force-replace",
            metavar="V",
            help="неразрешённые плейсхолдеры: false (оставить), true (пустая строка) или литерал",
        )
        sp.add_argument(
            "--arg-separator",
            metavar="C",
            help="разделитель аргументов директив (один символ, по умолчанию ';')",
        )

    sp_render = sub.add_parser("render", help="Отрендеренный текст")
    add_template(sp_render)
    add_render_opts(sp_render)

    sp_report = sub.add_parser("report", help="JSON-отчёт: результат, ошибки, плейсхолдеры")
    add_template(sp_report)
    add_render_opts(sp_report)

    sp_scan = sub.add_parser("scan", help="Список плейсхолдеров (JSON)")
    add_template(sp_scan)

    return p


def _parse_force_replace(value: str) -> ForceReplace:
    """false/off/no -> False, true/on/yes/empty -> True, иначе литерал."""
    lowered = value.strip().lower()
    if lowered in ("false", "off", "no"):
        return False
    if lowered in ("true", "on", "yes", "empty"):
        return True
    return value


def _load_cfg(ns: argparse.Namespace) -> EngineConfig:
    if getattr(ns, "config", None):
        return load_config(Path(ns.config))
    found = find_config(Path.cwd())
    return load_config(found) if found else EngineConfig()


def _apply_overrides(cfg: EngineConfig, ns: argparse.Namespace) -> EngineConfig:
    if getattr(ns, "force_replace", None) is not None:
        cfg = replace(cfg, force_replace=_parse_force_replace(ns.force_replace))
    if getattr(ns, "arg_separator", None):
        cfg = replace(cfg, arg_separator=ns.arg_separator)
    if getattr(ns, "root", None):
        cfg = replace(cfg, template_root=str(Path(ns.root).resolve()))
    elif cfg.template_root is None and ns.template not in ("-",) and not is_reference(ns.template):
        # Импорты разрешаются относительно каталога шаблона
        cfg = replace(cfg, template_root=str(Path(ns.template).resolve().parent))
    return cfg


def _read_template(arg: str) -> str:
    """
    Читает шаблон.

    Ссылки '@alias/path' возвращаются как есть: их загружает движок.
    """
    if arg == "-":
        return sys.stdin.read()
    if is_reference(arg):
        return arg
    path = Path(arg)
    if not path.is_file():
        raise TemplateNotFoundError(str(path))
    return path.read_text(encoding="utf-8")


def _read_data(arg: Optional[str]) -> Dict[str, Any]:
    if not arg:
        return {}
    path = Path(arg)
    if not path.is_file():
        raise ValueError(f"Data file not found: {path}")
    return read_yaml_map(path)


def main(argv: list[str] | None = None) -> int:
    _setup_logging()
    ns = _build_parser().parse_args(argv)

    try:
        cfg = _apply_overrides(_load_cfg(ns), ns)
        engine = TemplateEngine.from_config(cfg)
        template = _read_template(ns.template)

        if ns.cmd == "scan":
            text = engine.source.load(template) if is_reference(template) and engine.source else template
            sys.stdout.write(dumps(build_scan_report(scan_placeholders(text)).model_dump(mode="json")))
            return 0

        data = _read_data(getattr(ns, "data", None))

        if ns.cmd == "render":
            output = engine.render(template, data)
            sys.stdout.write(output)
            engine.flush_errors()
            return 0

        if ns.cmd == "report":
            output = engine.render(template, data)
            report = build_render_report(output, engine.get_errors(), engine.get_resources())
            engine.clear_errors()
            sys.stdout.write(dumps(report.model_dump(mode="json")))
            return 0

    except HTEUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2
    except ValueError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
