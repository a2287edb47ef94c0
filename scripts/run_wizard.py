#!/usr/bin/env python3
"""
Wizard runner

Usage:
  python scripts/run_wizard.py run --wizard-file <path> [--base-url <url>] [--roster-file <csv>]
  python scripts/run_wizard.py run --wizard-id <id> [--base-url <url>] [--roster-file <csv>]
  python scripts/run_wizard.py open --wizard-id <id> --api-base-url <url> [--wait-sec <sec>]
  python scripts/run_wizard.py step --session-id <id> --step-id <step> --api-base-url <url> [--input-file <path>] [--wait-sec <sec>]
  python scripts/run_wizard.py view --session-id <id> --api-base-url <url>
  python scripts/run_wizard.py logs --session-id <id> --api-base-url <url>

Examples:
  python scripts/run_wizard.py wizards/cert_demo.yaml
  python scripts/run_wizard.py run --wizard-id cert_demo --base-url http://115.27.243.20/cert-demo --roster-file roster.csv
  python scripts/run_wizard.py open --wizard-id cert_demo --api-base-url http://localhost:8000 --wait-sec 10
  python scripts/run_wizard.py step --session-id <id> --step-id template --api-base-url http://localhost:8000 --wait-sec 30
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from uuid import uuid4

import requests
from dotenv import load_dotenv

load_dotenv()

from infrastructure.logging.log_setup import add_file_logging, setup_console_logging

from application.executor.handler_registry import HandlerRegistry
from application.executor.step_orchestrator import StepOrchestrator
from application.ports.requests_client import RequestsSessionHttpClient
from application.services.execution_deps import ExecutionDeps
from application.services.execution_error_builder import ExecutionErrorBuilder
from domain.session import WizardSession
from domain.steps.http import RemoteStep
from domain.wizard import Wizard
from infrastructure.config.settings import WizardSettings
from infrastructure.logging.console_logger import ConsoleLogger
from infrastructure.session.thread_step_scheduler import ThreadStepScheduler
from infrastructure.url.endpoint_resolver import EndpointResolver
from infrastructure.wizard.base_loader import WizardLoadError
from infrastructure.wizard.file_finder import WizardFileFinder
from infrastructure.wizard.loader_registry import WizardLoaderRegistry

DEFAULT_API_TIMEOUT_SEC = 60
COMMANDS = {"run", "open", "step", "view", "logs"}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Certificate wizard runner")
    subparsers = parser.add_subparsers(dest="command")

    run_parser = subparsers.add_parser("run", help="Run every wizard step locally, in order")
    run_parser.add_argument("--wizard-id", type=str)
    run_parser.add_argument("--wizard-file", type=str)
    run_parser.add_argument("--base-url", type=str, help="Overrides WIZARD_BASE_URL and the wizard file")
    run_parser.add_argument("--timeout-sec", type=float)
    run_parser.add_argument("--roster-file", type=str, help="CSV sent by the roster step")
    run_parser.add_argument("--log-level", type=str)
    run_parser.add_argument("--log-file", type=str, help="Also write DEBUG logs to this file")

    open_parser = subparsers.add_parser("open", help="Open a session via API")
    open_parser.add_argument("--wizard-id", type=str, required=True)
    open_parser.add_argument("--api-base-url", type=str, required=True)
    open_parser.add_argument("--wait-sec", type=int)

    step_parser = subparsers.add_parser("step", help="Trigger one step via API")
    step_parser.add_argument("--session-id", type=str, required=True)
    step_parser.add_argument("--step-id", type=str, required=True)
    step_parser.add_argument("--api-base-url", type=str, required=True)
    step_parser.add_argument("--input-file", type=str)
    step_parser.add_argument("--wait-sec", type=int)

    view_parser = subparsers.add_parser("view", help="Fetch the session view via API")
    view_parser.add_argument("--session-id", type=str, required=True)
    view_parser.add_argument("--api-base-url", type=str, required=True)

    logs_parser = subparsers.add_parser("logs", help="Fetch session logs via API")
    logs_parser.add_argument("--session-id", type=str, required=True)
    logs_parser.add_argument("--api-base-url", type=str, required=True)

    return parser


def _read_text(path: str, label: str) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ValueError(f"Unable to read {label} file: {exc}") from exc


def _load_wizard(args: argparse.Namespace, settings: WizardSettings) -> Wizard:
    if args.wizard_file:
        wizard_path = Path(args.wizard_file)
    elif args.wizard_id:
        wizard_path = WizardFileFinder(settings.wizard_dir).find_by_id(args.wizard_id)
        if wizard_path is None:
            raise ValueError(f"Wizard file not found: {args.wizard_id}")
    else:
        raise ValueError("wizard-file or wizard-id is required for local run")

    try:
        return WizardLoaderRegistry().load(wizard_path)
    except WizardLoadError as e:
        raise ValueError(f"Failed to load wizard: {e}") from e


def _roster_inputs(wizard: Wizard, roster_file: str | None) -> dict:
    if not roster_file:
        return {}
    csv = _read_text(roster_file, "roster")
    inputs = {}
    for step in wizard.steps:
        if isinstance(step, RemoteStep) and step.input_area:
            inputs[step.id] = csv
    if not inputs:
        raise ValueError("This wizard has no step that takes input")
    return inputs


def _print_session(wizard: Wizard, session: WizardSession) -> None:
    for step in wizard.ordered_steps():
        print(f"--- {step.id} [{session.status_of(step.id).value}] ---")
        print(session.view.areas.get(step.display, ""))
    for link_id, href in session.view.links.items():
        if href:
            print(f"{link_id}: {href}")


def _run_local(args: argparse.Namespace) -> int:
    settings = WizardSettings.from_env().with_overrides(
        base_url=args.base_url,
        timeout_sec=args.timeout_sec,
        log_level=args.log_level.upper() if args.log_level else None,
    )
    setup_console_logging(level=settings.log_level)
    if args.log_file:
        add_file_logging(args.log_file)

    wizard = _load_wizard(args, settings)
    inputs = _roster_inputs(wizard, args.roster_file)
    http = settings.http_defaults(wizard.defaults.http)

    print(f"Wizard: {wizard.meta.name} (v{wizard.meta.version})")
    print(f"Endpoint: {EndpointResolver(http.base_url, http.endpoint).resolve('<step>')}")
    print(f"Steps: {len(wizard.steps)}")

    scheduler = ThreadStepScheduler(max_workers=1)
    http_client = RequestsSessionHttpClient(base_headers=http.headers, timeout_sec=http.timeout_sec)
    orchestrator = StepOrchestrator(HandlerRegistry.default(), http_client, scheduler)
    deps = ExecutionDeps(
        endpoint_resolver=EndpointResolver(base_url=http.base_url, endpoint=http.endpoint),
        logger=ConsoleLogger(),
        timeout_sec=http.timeout_sec,
    )
    session = WizardSession.open(uuid4().hex, wizard)

    print("\n=== Executing ===\n")
    try:
        result = orchestrator.run(wizard, session, deps, inputs=inputs)
    finally:
        scheduler.shutdown()
        http_client.close()

    print("\n=== Result ===")
    print(f"Session ID: {session.session_id}")
    print(f"Success: {result.ok}")
    if not result.ok:
        detail = ExecutionErrorBuilder().build_from_result(result, session)
        print(f"Failed Step: {detail.step_id}")
        print(f"Error: {detail.message}")
        if detail.last_status is not None:
            print(f"Last Status: {detail.last_status}")
    _print_session(wizard, session)

    return 0 if result.ok else 1


def _api_url(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}{path}"


def _print_response(response: requests.Response) -> None:
    print(f"Status: {response.status_code}")
    print(json.dumps(response.json(), indent=2, ensure_ascii=False))


def _open_api(args: argparse.Namespace) -> int:
    params = {"wait_sec": args.wait_sec} if args.wait_sec is not None else {}
    response = requests.post(
        _api_url(args.api_base_url, f"/wizards/{args.wizard_id}/sessions"),
        params=params,
        timeout=DEFAULT_API_TIMEOUT_SEC,
    )
    _print_response(response)
    return 0 if response.status_code == 201 else 1


def _step_api(args: argparse.Namespace) -> int:
    payload = {}
    if args.input_file:
        payload["input"] = _read_text(args.input_file, "input")
    params = {"wait_sec": args.wait_sec} if args.wait_sec is not None else {}
    response = requests.post(
        _api_url(args.api_base_url, f"/sessions/{args.session_id}/steps/{args.step_id}"),
        json=payload,
        params=params,
        timeout=DEFAULT_API_TIMEOUT_SEC,
    )
    _print_response(response)
    if response.status_code == 202:
        return 0
    if response.status_code >= 400:
        return 1
    return 0 if response.json().get("error_detail") is None else 1


def _get_api(args: argparse.Namespace, path: str) -> int:
    response = requests.get(_api_url(args.api_base_url, path), timeout=DEFAULT_API_TIMEOUT_SEC)
    response.raise_for_status()
    print(json.dumps(response.json(), indent=2, ensure_ascii=False))
    return 0


def main() -> None:
    parser = _build_parser()
    argv = sys.argv[1:]
    if argv and argv[0] not in COMMANDS and not argv[0].startswith("-"):
        argv = ["run", "--wizard-file", argv[0]] + argv[1:]
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        if args.command == "run":
            exit_code = _run_local(args)
        elif args.command == "open":
            exit_code = _open_api(args)
        elif args.command == "step":
            exit_code = _step_api(args)
        elif args.command == "view":
            exit_code = _get_api(args, f"/sessions/{args.session_id}")
        elif args.command == "logs":
            exit_code = _get_api(args, f"/sessions/{args.session_id}/logs")
        else:
            raise ValueError(f"Unknown command: {args.command}")
    except ValueError as exc:
        print(f"ERROR: {exc}")
        sys.exit(1)
    except requests.RequestException as exc:
        print(f"ERROR: API request failed: {exc}")
        sys.exit(1)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
