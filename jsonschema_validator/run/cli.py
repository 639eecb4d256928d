"""
CLI entrypoint for validating documents.

Exit codes:
    0  all validations passed
    1  one or more documents failed or a schema failed to compile
    2  usage or configuration error
"""

import argparse
import logging
import sys
from typing import List, Optional

from .. import __version__
from ..config import DEFAULT_ENV_PREFIX, build_cli_overlay, resolve_config
from ..exceptions import UsageError
from ..validation.orchestrator import run_validation
from ..validation.parser import FileType
from ..validation.templates import COMMON_ERROR_TEMPLATES, list_common_templates
from .report import JsonReporter, TextReporter

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_VALIDATION_FAIL = 1
EXIT_USAGE_ERROR = 2


def setup_logging(level: str = "WARNING"):
    """Setup logging configuration"""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def _log_level(args: argparse.Namespace) -> str:
    if args.log_level:
        return args.log_level
    if args.quiet:
        return "ERROR"
    if args.verbose >= 2:
        return "DEBUG"
    if args.verbose == 1:
        return "INFO"
    return "WARNING"


def cmd_list_templates():
    """List built-in error templates"""
    print("\n" + "=" * 70)
    print("BUILT-IN ERROR TEMPLATES (use with --error-template @name)")
    print("=" * 70)
    for name in list_common_templates():
        first_line = COMMON_ERROR_TEMPLATES[name].splitlines()[0]
        print(f"  - {name:<12} {first_line}")
    print("=" * 70 + "\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jsonschema-validator",
        description="Validate JSON/JSON5/YAML/TOML documents against JSON Schema",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Validate a single document
  jsonschema-validator -s schema.json document.json

  # Use glob patterns
  jsonschema-validator -s schema.json "configs/*.json"

  # Override a remote $ref with a local file
  jsonschema-validator -s schema.json -r https://example.com/schema.json=./local.json doc.json

  # Use a configuration file
  jsonschema-validator -c .jsonschema-validator.yaml

  # Configuration auto-discovery (checks in order):
  #   1. .jsonschema-validator.yaml (or .yml, .toml, .json)
  #   2. pyproject.toml [tool.jsonschema-validator]
  #   3. package.json "jsonschema-validator" field
  #   4. ~/.jsonschema-validator.yaml
        """,
    )

    parser.add_argument(
        "paths",
        nargs="*",
        metavar="DOCUMENT",
        help="Additional document paths or glob patterns",
    )

    parser.add_argument(
        "-c", "--config",
        type=str,
        help="Path to configuration file (.yaml, .yml, .toml, or .json); disables auto-discovery",
    )

    parser.add_argument(
        "-s", "--schema",
        type=str,
        help="Path to JSON Schema file (required unless configured)",
    )

    parser.add_argument(
        "--schema-version",
        type=str,
        help="Default JSON Schema draft (draft/2020-12, draft/2019-09, draft-07, draft-06, draft-04); "
             "schemas that set their own schema_version keep it unless rebuilt by --schema/--document",
    )

    parser.add_argument(
        "-e", "--error-template",
        type=str,
        help="Default Jinja2 error template, or @name for a built-in; "
             "schemas that set their own error_template keep it unless rebuilt by --schema/--document",
    )

    parser.add_argument(
        "-r", "--ref-override",
        action="append",
        dest="ref_overrides",
        metavar="URL=PATH",
        help="Resolve $ref URL from a local file (can be used multiple times)",
    )

    parser.add_argument(
        "-d", "--document",
        action="append",
        dest="documents",
        metavar="PATH",
        help="Document to validate, globs supported (can be used multiple times)",
    )

    parser.add_argument(
        "--env-prefix",
        type=str,
        default=DEFAULT_ENV_PREFIX,
        help=f"Environment variable prefix (default: {DEFAULT_ENV_PREFIX})",
    )

    parser.add_argument(
        "--force-filetype",
        choices=[t.value for t in FileType if t is not FileType.AUTO],
        help="Parse documents as this type instead of by extension",
    )

    parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Only print failures",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="More logging (-vv for debug) and a summary line",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (overrides --verbose/--quiet)",
    )

    parser.add_argument(
        "-V", "--version",
        action="store_true",
        help="Show version and exit",
    )

    parser.add_argument(
        "--list-templates",
        action="store_true",
        help="List built-in error templates and exit",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entrypoint"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"jsonschema-validator version {__version__}")
        return EXIT_SUCCESS

    if args.list_templates:
        cmd_list_templates()
        return EXIT_SUCCESS

    setup_logging(_log_level(args))

    try:
        cli_overlay = build_cli_overlay(
            schema=args.schema,
            documents=(args.documents or []) + args.paths,
            schema_version=args.schema_version,
            error_template=args.error_template,
            ref_overrides=args.ref_overrides,
        )
        config = resolve_config(
            config_file=args.config,
            env_prefix=args.env_prefix,
            cli_overlay=cli_overlay,
        )
    except UsageError as e:
        print(f"Error: {e}", file=sys.stderr)
        logger.debug("Configuration failed", exc_info=True)
        return EXIT_USAGE_ERROR

    if args.format == "json":
        reporter = JsonReporter()
    else:
        reporter = TextReporter(quiet=args.quiet, summary=args.verbose > 0)

    result = run_validation(config, force_filetype=args.force_filetype, listener=reporter)
    return EXIT_SUCCESS if result.valid else EXIT_VALIDATION_FAIL


if __name__ == "__main__":
    sys.exit(main())
