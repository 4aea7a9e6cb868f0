import argparse
import json
import logging
import sys
from dataclasses import asdict
from enum import Enum
from pathlib import Path
from typing import List, Optional

from .core.ast_parser import is_supported_file
from .core.di import DependencyAnalyzer, apply_edit, create_registration_edit
from .core.di.diagnostics import build_diagnostics, render_analysis_report, render_suggestions_report
from .setting import get_settings, load_settings

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NO_TARGET = 1
EXIT_USAGE = 2


def setup_logging(log_level: str = "INFO") -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr)  # stdout is reserved for command output
        ],
        force=True,
    )


def _json_default(value):
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _read_source(path: Path) -> Optional[str]:
    if not is_supported_file(str(path)):
        logger.error(f"This command works on C# files: {path}")
        return None
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.error(f"Cannot read {path}: {e}")
        return None


def _cmd_analyze(args, analyzer: DependencyAnalyzer) -> int:
    source = _read_source(args.file)
    if source is None:
        return EXIT_USAGE

    result = analyzer.analyze(source, str(args.file))
    if args.json:
        print(json.dumps(asdict(result), indent=2, default=_json_default, ensure_ascii=False))
    elif args.diagnostics:
        for diag in build_diagnostics(result, source):
            print(
                f"{args.file}:{diag.start.line + 1}:{diag.start.character + 1}: "
                f"{diag.severity.value}: {diag.message}"
            )
    else:
        print("\n".join(render_analysis_report(result, str(args.file))))
    return EXIT_OK


def _cmd_suggest(args, analyzer: DependencyAnalyzer) -> int:
    source = _read_source(args.file)
    if source is None:
        return EXIT_USAGE

    result = analyzer.analyze(source, str(args.file))
    suggestions = analyzer.suggest_registrations(result.constructors, source) if result.constructors else []
    print("\n".join(render_suggestions_report(result.constructors, suggestions, str(args.file))))
    return EXIT_OK


def _cmd_fix(args, analyzer: DependencyAnalyzer) -> int:
    source = _read_source(args.file)
    if source is None:
        return EXIT_USAGE

    type_names: List[str] = args.types
    if not type_names:
        result = analyzer.analyze(source, str(args.file))
        type_names = list(dict.fromkeys(i.param_type for i in result.missing_registration_issues))
    if not type_names:
        logger.info(f"No missing registrations in {args.file}")
        return EXIT_OK

    updated = source
    for type_name in type_names:
        edit = create_registration_edit(updated, type_name, analyzer.settings.registration)
        if edit is None:
            logger.error(
                f"No '{analyzer.settings.registration.configure_signature}' body found in {args.file}"
            )
            return EXIT_NO_TARGET
        updated = apply_edit(updated, edit)
        logger.info(f"Added registration for {type_name}")

    if args.write:
        args.file.write_text(updated, encoding="utf-8")
        logger.info(f"Wrote {args.file}")
    else:
        sys.stdout.write(updated)
    return EXIT_OK


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="diinspector",
        description="diinspector - constructor-injection analysis for C# files",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: from settings)"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a diinspector.yaml settings file"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    analyze_cmd = sub.add_parser("analyze", help="List constructor dependencies and DI issues")
    analyze_cmd.add_argument("file", type=Path)
    output = analyze_cmd.add_mutually_exclusive_group()
    output.add_argument("--json", action="store_true", help="Print the raw result as JSON")
    output.add_argument("--diagnostics", action="store_true", help="Print one diagnostic per line")
    analyze_cmd.set_defaults(handler=_cmd_analyze)

    suggest_cmd = sub.add_parser("suggest", help="Suggest container registrations")
    suggest_cmd.add_argument("file", type=Path)
    suggest_cmd.set_defaults(handler=_cmd_suggest)

    fix_cmd = sub.add_parser("fix", help="Insert registrations into ConfigureServices")
    fix_cmd.add_argument("file", type=Path)
    fix_cmd.add_argument("types", nargs="*", help="Types to register (default: all missing)")
    fix_cmd.add_argument("--write", action="store_true", help="Rewrite the file in place")
    fix_cmd.set_defaults(handler=_cmd_fix)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for diinspector."""
    args = build_arg_parser().parse_args(argv)

    settings = load_settings(args.config) if args.config else get_settings()
    setup_logging(args.log_level or settings.log_level)

    analyzer = DependencyAnalyzer(settings=settings)
    return args.handler(args, analyzer)


if __name__ == "__main__":
    sys.exit(main())
