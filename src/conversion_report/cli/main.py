"""Main CLI entry point."""

import argparse
import copy
import json
import sys
from pathlib import Path


def main() -> None:
    """Parse args and dispatch to subcommands."""
    parser = argparse.ArgumentParser(prog="conversion-report", description="Incremental CRM conversion report job")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config YAML (default: read environment variables)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # run
    run_parser = subparsers.add_parser("run", help="Run one incremental report now")
    run_parser.add_argument(
        "--env",
        default="prod",
        choices=["prod", "uat"],
        help="CRM environment (default: prod)",
    )
    run_parser.add_argument(
        "--report-type",
        default="googleSearchAdsConversions",
        help="Report type to run",
    )
    _add_store_args(run_parser)
    run_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Also write the report body to this file",
    )

    # watermark
    watermark_parser = subparsers.add_parser("watermark", help="Inspect the watermark history")
    watermark_parser.add_argument(
        "action",
        choices=["show", "last"],
        help="Print full history or just the last boundary",
    )
    _add_store_args(watermark_parser)

    # reports
    subparsers.add_parser("reports", help="List supported report types")

    # serve
    serve_parser = subparsers.add_parser("serve", help="Serve the HTTP trigger endpoint")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Bind host")
    serve_parser.add_argument("--port", type=int, default=8000, help="Bind port")
    _add_store_args(serve_parser)

    args = parser.parse_args()

    if args.command == "run":
        _run_report(args)
    elif args.command == "watermark":
        _run_watermark(args)
    elif args.command == "reports":
        _run_reports(args)
    elif args.command == "serve":
        _run_serve(args)
    else:
        parser.print_help()


def _add_store_args(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument(
        "--store",
        default="firebase",
        choices=["firebase", "sqlite"],
        help="Watermark store backend (default: firebase)",
    )
    subparser.add_argument(
        "--db",
        type=Path,
        default=Path("conversion_report.db"),
        help="SQLite database path when --store sqlite",
    )


def _load(args: argparse.Namespace):
    from conversion_report.config import load_config
    from conversion_report.logutil import configure_logging

    config = load_config(args.config)
    configure_logging(config.log_level)
    return config


def _make_store(config, args: argparse.Namespace):
    from conversion_report.pipeline import make_store

    try:
        return make_store(config, args.store, args.db)
    except ValueError as e:
        raise SystemExit(str(e))


def _run_report(args: argparse.Namespace) -> None:
    """Run command."""
    from conversion_report.errors import ReportJobError
    from conversion_report.logutil import new_request_id
    from conversion_report.pipeline import (
        make_connector,
        make_notifier,
        run_incremental_report,
        send_error_alert,
    )
    from conversion_report.reports import ReportRegistry

    config = _load(args)
    try:
        report = ReportRegistry.get(args.report_type)
    except ReportJobError as e:
        raise SystemExit(e.message)

    request_id = new_request_id()
    store = _make_store(config, args)
    try:
        connector = make_connector(config, args.env)
    except ValueError as e:
        store.close()
        raise SystemExit(str(e))
    notifier = make_notifier(config)
    try:
        outcome = run_incremental_report(
            config,
            report=report,
            connector=connector,
            store=store,
            notifier=notifier,
            environment=args.env,
            request_id=request_id,
        )
    except ReportJobError as e:
        send_error_alert(config, notifier, e, request_id=request_id, source=f"conversion-report run {args.report_type}")
        print(f"{type(e).__name__}: {e.message}\n{json.dumps(e.body, indent=2, default=str)}", file=sys.stderr)
        raise SystemExit(1)
    finally:
        connector.close()
        store.close()
        notifier.close()

    if args.output:
        args.output.write_text(outcome.report_body, encoding="utf-8")
    summary = outcome.to_response()
    summary.pop("queryResponse")
    print(json.dumps(summary, indent=2))


def _run_watermark(args: argparse.Namespace) -> None:
    """Watermark command."""
    from conversion_report.errors import StoreError

    config = _load(args)
    store = _make_store(config, args)
    try:
        history = store.load_history(config.firebase.root, config.firebase.child_key)
    except StoreError as e:
        raise SystemExit(e.message)
    finally:
        store.close()

    if args.action == "last":
        print(history.last)
    else:
        print(json.dumps(history.run_date_times, indent=2))


def _run_reports(args: argparse.Namespace) -> None:
    """Reports command."""
    from conversion_report.reports import ReportRegistry

    for report_type in ReportRegistry.available_reports():
        print(report_type)


def _run_serve(args: argparse.Namespace) -> None:
    """Serve command."""
    import uvicorn

    from conversion_report.api import create_app

    config = _load(args)
    app = create_app(config, store=_make_store(config, args))
    uvicorn.run(
        app,
        host=args.host,
        port=args.port,
        log_level=config.log_level.lower(),
        log_config=_serve_log_config(),
    )


def _serve_log_config() -> dict:
    """uvicorn's default logging config with the Authorization value masked in access lines."""
    from uvicorn.config import LOGGING_CONFIG

    log_config = copy.deepcopy(LOGGING_CONFIG)
    log_config.setdefault("filters", {})["mask_authorization"] = {
        "()": "conversion_report.logutil.AuthorizationMaskFilter",
    }
    log_config["handlers"]["access"]["filters"] = ["mask_authorization"]
    return log_config


if __name__ == "__main__":
    main()
