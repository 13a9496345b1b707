# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the SpiderForm command-line interface."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

import yaml

from spiderform.config.loader import (
    STARTER_FORM,
    FormConfigError,
    RendererSettings,
    load_form_definition,
    load_renderer_settings,
)
from spiderform.errors import SpiderFormError
from spiderform.form.runtime import Form
from spiderform.validation.violations import FORM_LEVEL_KEY

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the SpiderForm CLI."""
    parser = argparse.ArgumentParser(
        prog="spiderform",
        description="SpiderForm - declarative form validation and rendering",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log output (-v: info, -vv: debug)",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # init subcommand
    init_parser = subparsers.add_parser(
        "init",
        help="Write a starter form definition",
        description="Create a starter form definition YAML file.",
    )
    init_parser.add_argument(
        "path",
        nargs="?",
        default=_DEFAULT_FORM_FILE,
        help=f"File to create (default: {_DEFAULT_FORM_FILE})",
    )

    # check subcommand
    check_parser = subparsers.add_parser(
        "check",
        help="Validate a data file against a form",
        description="Validate submitted data against a form definition and list all violations.",
    )
    check_parser.add_argument("form", help="Form definition YAML file")
    check_parser.add_argument("--data", required=True, help="YAML or JSON file with the data to validate")
    check_parser.add_argument(
        "--group",
        action="append",
        dest="groups",
        metavar="GROUP",
        help="Validation group to run (repeatable, default: Default)",
    )

    # render subcommand
    render_parser = subparsers.add_parser(
        "render",
        help="Render a form",
        description="Render a form definition as HTML, JSON or XML.",
    )
    render_parser.add_argument("form", help="Form definition YAML file")
    render_parser.add_argument("--data", help="YAML or JSON file with data to bind")
    render_parser.add_argument(
        "--format",
        choices=("html", "json", "xml"),
        help="Output format (default: the form's renderer setting, else html)",
    )
    render_parser.add_argument("--output", help="File to write (default: standard output)")
    render_parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate the bound data and include error messages",
    )

    # serve subcommand
    serve_parser = subparsers.add_parser(
        "serve",
        help="Launch the interactive form preview",
        description="Launch a web-based preview of the rendered form.",
    )
    serve_parser.add_argument("form", help="Form definition YAML file")
    serve_parser.add_argument("--data", help="YAML or JSON file with data to bind and validate")
    serve_parser.add_argument(
        "--port",
        type=int,
        default=8050,
        help="Port to run the server on (default: 8050)",
    )
    serve_parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind the server to (default: 127.0.0.1)",
    )

    args = parser.parse_args()
    _configure_logging(args.verbose)
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################

_DEFAULT_FORM_FILE = "form.yaml"


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "init":
        return _cmd_init(args)
    if args.command == "check":
        return _cmd_check(args)
    if args.command == "render":
        return _cmd_render(args)
    if args.command == "serve":
        return _cmd_serve(args)
    return 0


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _cmd_init(args: argparse.Namespace) -> int:
    """Handle the init subcommand."""
    path = Path(args.path).resolve()

    if not path.parent.exists():
        print(f"Error: directory '{path.parent}' does not exist.", file=sys.stderr)
        return 1

    if path.exists():
        print(f"Error: file already exists at '{path}'.", file=sys.stderr)
        return 1

    path.write_text(STARTER_FORM, encoding="utf-8")
    print(f"Created form definition at '{path}'.")
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    """Handle the check subcommand."""
    try:
        definition = load_form_definition(Path(args.form))
        data = _load_data(Path(args.data))
    except SpiderFormError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    form = Form(definition, data, validation_groups=args.groups)
    try:
        violations = form.get_violations()
    except SpiderFormError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if violations.is_empty():
        print(f"No violations found in '{args.data}'.")
        return 0

    for violation in violations:
        path = violation.path or FORM_LEVEL_KEY
        print(f"{path}: {violation.message}")
    print(f"Found {len(violations)} violation(s).", file=sys.stderr)
    return 1


def _cmd_render(args: argparse.Namespace) -> int:
    """Handle the render subcommand."""
    form_path = Path(args.form)
    try:
        form, settings = _load_form(form_path, args.data)
        renderer = settings.create_renderer(form_path.parent)
        if args.validate:
            form.get_violations()
        output = renderer.render(form, args.format)
    except SpiderFormError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    for warning in form.render_warnings:
        print(f"Warning: {warning.message}", file=sys.stderr)

    if args.output is None:
        print(output)
        return 0
    try:
        Path(args.output).write_text(output, encoding="utf-8")
    except OSError as exc:
        print(f"Error: cannot write output file: {exc}", file=sys.stderr)
        return 1
    print(f"Rendered form '{form.name}' to '{args.output}'.")
    return 0


def _cmd_serve(args: argparse.Namespace) -> int:
    """Handle the serve subcommand."""
    form_path = Path(args.form)
    try:
        form, settings = _load_form(form_path, args.data)
        renderer = settings.create_renderer(form_path.parent)
        if args.data is not None:
            form.get_violations()
    except SpiderFormError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    from spiderform.webui.app import create_app

    print(f"Serving form preview at http://{args.host}:{args.port}/")
    app = create_app(form=form, renderer=renderer)
    app.run(host=args.host, port=args.port, debug=False)
    return 0


def _load_form(form_path: Path, data_path: str | None) -> tuple[Form, RendererSettings]:
    definition = load_form_definition(form_path)
    settings = load_renderer_settings(form_path)
    data = _load_data(Path(data_path)) if data_path is not None else None
    return Form(definition, data), settings


def _load_data(path: Path) -> dict[str, Any]:
    """Load a YAML (or JSON) data file into a mapping."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise FormConfigError(f"Cannot read data file: {exc}") from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise FormConfigError(f"Invalid data in {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise FormConfigError(f"{path}: data file must contain a mapping")
    return data
