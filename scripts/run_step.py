#!/usr/bin/env python3
"""
HTTP request step runner

Usage:
  python scripts/run_step.py run --file <path> [--json-logs] [--log-level LEVEL]
  python scripts/run_step.py request --url <url> [options]
  python scripts/run_step.py <path>

Examples:
  python scripts/run_step.py build/healthcheck.yaml
  python scripts/run_step.py request --url http://localhost:8000/health --response-regex '/"status":\s*"ok"/'
  python scripts/run_step.py request --url http://localhost:8000/login --method POST \
      --post user=admin --post password=secret --verbose --observer-events connect,disconnect

Exit codes: 0 success, 2 configuration error, 3 transport error, 4 validation error.
"""
from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from dotenv import load_dotenv

load_dotenv()

from application.executor.step_executor import ExecutionResult, StepExecutor
from application.handlers.http_request_handler import HttpRequestStepHandler
from application.ports.logger import LoggerPort
from application.ports.requests_client import RequestsHttpClient
from application.services.execution_deps import ExecutionDeps
from domain.events import parse_observer_events
from domain.parameters import ParameterSet
from domain.run import RunContext
from domain.steps.http import HttpRequestStep
from infrastructure.logging.console_logger import ConsoleLogger
from infrastructure.logging.log_setup import setup_console_logging
from infrastructure.logging.loguru_logger import LoguruLogger
from infrastructure.steps.base_loader import StepConfigLoadError
from infrastructure.steps.loader_registry import StepConfigLoaderRegistry

USER_AGENT = "http-request-step/0.1"
PASSWORD_ENV = "HTTP_STEP_AUTH_PASSWORD"

EXIT_OK = 0
EXIT_CONFIG_ERROR = 2
EXIT_TRANSPORT_ERROR = 3
EXIT_VALIDATION_ERROR = 4

_EXIT_CODES = {
    "ConfigError": EXIT_CONFIG_ERROR,
    "TransportError": EXIT_TRANSPORT_ERROR,
    "ValidationError": EXIT_VALIDATION_ERROR,
}


def _parse_pair(raw: str, label: str) -> Tuple[str, str]:
    name, sep, value = raw.partition("=")
    if not sep or not name:
        raise ValueError(f"{label} must look like NAME=VALUE, got: {raw!r}")
    return name, value


def _pairs(raw_items: Optional[List[str]], label: str) -> ParameterSet:
    params = ParameterSet()
    for raw in raw_items or []:
        params.add(*_parse_pair(raw, label))
    return params


def _add_logging_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--json-logs", action="store_true", help="Print JSON log lines instead of loguru output")
    parser.add_argument("--log-level", type=str, default="INFO")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Send an HTTP request and check the response body")
    subparsers = parser.add_subparsers(dest="command")

    run_parser = subparsers.add_parser("run", help="Run every step of a YAML/JSON build file")
    run_parser.add_argument("--file", type=str, required=True)
    _add_logging_args(run_parser)

    req_parser = subparsers.add_parser("request", help="Run a single step described by flags")
    req_parser.add_argument("--id", type=str, default="request")
    req_parser.add_argument("--url", type=str)
    req_parser.add_argument("--response-regex", type=str, default="")
    req_parser.add_argument("--verbose", action="store_true")
    req_parser.add_argument("--observer-events", type=str)
    req_parser.add_argument("--method", type=str)
    req_parser.add_argument("--auth-user", type=str)
    req_parser.add_argument("--auth-password", type=str, default=os.environ.get(PASSWORD_ENV, ""))
    req_parser.add_argument("--auth-scheme", type=str)
    req_parser.add_argument("--header", action="append", metavar="NAME=VALUE")
    req_parser.add_argument("--config", action="append", metavar="NAME=VALUE")
    req_parser.add_argument("--post", action="append", metavar="NAME=VALUE")
    _add_logging_args(req_parser)

    return parser


def _step_from_args(args: argparse.Namespace) -> HttpRequestStep:
    return HttpRequestStep(
        id=args.id,
        name=args.id,
        url=args.url,
        response_regex=args.response_regex or "",
        verbose=args.verbose,
        observer_events=parse_observer_events(args.observer_events),
        method=args.method,
        auth_user=args.auth_user,
        auth_password=args.auth_password or "",
        auth_scheme=args.auth_scheme,
        headers=_pairs(args.header, "--header"),
        config=_pairs(args.config, "--config"),
        post_parameters=_pairs(args.post, "--post"),
    )


def _make_logger(args: argparse.Namespace) -> LoggerPort:
    if args.json_logs:
        return ConsoleLogger(min_level=args.log_level.lower())
    setup_console_logging(level=args.log_level)
    return LoguruLogger()


def _exit_code(result: ExecutionResult) -> int:
    if result.ok:
        return EXIT_OK
    return _EXIT_CODES.get(result.error_type or "", EXIT_CONFIG_ERROR)


def _run_steps(steps: List[HttpRequestStep], args: argparse.Namespace) -> int:
    handler = HttpRequestStepHandler(RequestsHttpClient(base_headers={"User-Agent": USER_AGENT}))
    executor = StepExecutor([handler])
    deps = ExecutionDeps(logger=_make_logger(args))
    ctx = RunContext()

    result = executor.execute(steps, ctx, deps)

    print("\n=== Result ===")
    print(f"Run ID: {ctx.run_id}")
    print(f"Success: {result.ok}")
    if not result.ok:
        print(f"Failed Step: {result.failed_step_id}")
        print(f"Error: {result.error_type}: {result.error_message}")
    elif ctx.last is not None:
        print(f"Status: {ctx.last.status}")

    return _exit_code(result)


def _run_file(args: argparse.Namespace) -> int:
    path = Path(args.file)
    steps = StepConfigLoaderRegistry().load(path)
    if not steps:
        raise ValueError(f"No steps defined in {path}")
    return _run_steps(steps, args)


def _run_request(args: argparse.Namespace) -> int:
    return _run_steps([_step_from_args(args)], args)


def main() -> None:
    parser = _build_parser()
    argv = sys.argv[1:]
    if argv and argv[0] not in {"run", "request", "-h", "--help"}:
        argv = ["run", "--file", argv[0]] + argv[1:]
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(EXIT_CONFIG_ERROR)

    try:
        if args.command == "run":
            exit_code = _run_file(args)
        elif args.command == "request":
            exit_code = _run_request(args)
        else:
            raise ValueError(f"Unknown command: {args.command}")
    except (ValueError, StepConfigLoadError) as exc:
        print(f"ERROR: {exc}")
        sys.exit(EXIT_CONFIG_ERROR)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
