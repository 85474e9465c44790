"""
Command-line interface for inspecting order sessions.

Usage:
    order-session validate --order-id <id> --orders <orders.json> --requirements <requirements.yaml>
    order-session pages --order-id <id> --orders <...> --requirements <...> [--route <route_id>]
    order-session range --order-id <id> --orders <...> --requirements <...> --section <section_key>
"""

import argparse
import json
import sys

from ordersession.config import SessionConfig
from ordersession.core.models import Order, RangeType
from ordersession.observability.logger import PACKAGE_LOGGER_NAME, get_logger, setup_logger
from ordersession.observability.metrics import start_metrics_server
from ordersession.session import NotFoundError, OrderSession
from ordersession.stores import JsonFileOrderStore, YamlRequirementsProvider
from ordersession.utils.validation import InputValidationError, validate_file_path, validate_section_key

logger = get_logger(__name__)


def build_session(args, config: SessionConfig, **session_kwargs) -> OrderSession:
    """Create and load a session from the command's file arguments."""
    store = JsonFileOrderStore(validate_file_path(args.orders, "orders"))
    provider = YamlRequirementsProvider(validate_file_path(args.requirements, "requirements"))

    session = OrderSession(
        store,
        provider,
        config.load_catalog(),
        config.load_rules(),
        planner=config.planner(),
        phrases=config.load_phrases(),
        **session_kwargs,
    )
    return session.load(args.order_id)


def emit(payload: dict) -> None:
    print(json.dumps(payload, indent=2, default=str))


def validate_command(args, config: SessionConfig) -> int:
    """
    Run a full validation pass over an order and report its findings.

    Returns:
        0 when the order has no errors, 2 otherwise
    """
    session = build_session(args, config)
    view = session.render()

    payload = {"order_id": args.order_id, "errors": view.errors, "warnings": view.warnings}
    if args.json:
        emit(payload)
    else:
        print(f"\n{'=' * 80}")
        print(f"VALIDATION REPORT FOR ORDER: {args.order_id}")
        print(f"{'=' * 80}\n")

        if not view.errors and not view.warnings:
            print("No validation findings.")
        for label, findings in (("ERROR", view.errors), ("WARNING", view.warnings)):
            for path in sorted(findings):
                for message in findings[path]:
                    print(f"{label:<8} {path:<40} {message}")

    return 0 if not view.errors else 2


def pages_command(args, config: SessionConfig) -> int:
    """List the order's service pages and, for --route, its previous/next links."""
    session = build_session(args, config, route_id=args.route)
    view = session.render()

    payload = {
        "order_id": args.order_id,
        "services_supported": view.are_services_supported,
        "pages": [page.model_dump() for page in view.pages],
        "previous": view.previous.model_dump() if view.previous else None,
        "next": view.next.model_dump() if view.next else None,
    }
    if args.json:
        emit(payload)
    else:
        print(f"\n{'Step':<6} {'Service':<15} {'Route':<30} {'Progress'}")
        print(f"{'-' * 80}")
        for page in view.pages:
            print(f"{page.step_index:<6} {page.service_key:<15} {page.route_id:<30} "
                  f"{page.completed_count}/{page.total_count}")
        if not view.are_services_supported:
            print("\nWARNING: some required services have no page")
        if view.previous and view.next:
            print(f"\nPrevious: {view.previous.url}")
            print(f"Next:     {view.next.url}")

    return 0


def range_command(args, config: SessionConfig) -> int:
    """Show the collection range state of one section."""
    validate_section_key(args.section, Order.SECTION_TYPES, "section")
    range_type = RangeType(args.range_type) if args.range_type else None
    session = build_session(args, config, section_key=args.section, range_type=range_type)

    state = session.collection_range
    if state is None:
        logger.error(f"Section '{args.section}' is not a collection section")
        return 1

    if args.json:
        emit({"order_id": args.order_id, "section": args.section, **state.model_dump(mode="json")})
    else:
        print(f"\nSection:        {args.section}")
        print(f"Range type:     {state.range_type.value}")
        print(f"Min / Max:      {state.min} / {state.max}")
        print(f"Max met:        {state.max_met}")
        print(f"Gaps confirmed: {state.gaps_confirmed}")
        print(f"Introduction:   {state.intro_text or '-'}")

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Order editing session tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Validate an order against its invitation's requirements
  order-session validate --order-id ORD-1001 --orders data/orders.json \\
      --requirements data/requirements.yaml

  # Show pages with navigation around the education page
  order-session pages --order-id ORD-1001 --orders data/orders.json \\
      --requirements data/requirements.yaml --route order.education
        """
    )
    parser.add_argument("--rules", help="Validation rules YAML (default: ORDER_RULES_PATH)")
    parser.add_argument("--services", help="Service catalog YAML (default: ORDER_SERVICES_PATH)")
    parser.add_argument("--phrases", help="Phrase templates YAML (default: ORDER_PHRASES_PATH)")
    parser.add_argument("--log-level", help="Log level (default: LOG_LEVEL or INFO)")
    parser.add_argument(
        "--metrics",
        action="store_true",
        help="Expose Prometheus metrics on METRICS_PORT while running"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    def add_common(subparser):
        subparser.add_argument("--order-id", required=True, help="Order ID")
        subparser.add_argument("--orders", required=True, help="Path to orders JSON store")
        subparser.add_argument("--requirements", required=True, help="Path to requirements YAML")
        subparser.add_argument("--json", action="store_true", help="Print JSON instead of a table")

    add_common(subparsers.add_parser("validate", help="Validate an order"))

    pages_parser = subparsers.add_parser("pages", help="List service pages and navigation")
    add_common(pages_parser)
    pages_parser.add_argument("--route", help="Current page route for previous/next links")

    range_parser = subparsers.add_parser("range", help="Show a section's collection range")
    add_common(range_parser)
    range_parser.add_argument("--section", required=True, help="Collection section key")
    range_parser.add_argument(
        "--range-type",
        choices=[item.value for item in RangeType],
        help="Override the catalog's range type"
    )

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    config = SessionConfig.from_env(
        rules_path=args.rules,
        services_path=args.services,
        phrases_path=args.phrases,
        log_level=args.log_level,
    )
    setup_logger(PACKAGE_LOGGER_NAME, level=config.log_level, format_type=config.log_format)
    if args.metrics:
        start_metrics_server(config.metrics_port)

    commands = {
        "validate": validate_command,
        "pages": pages_command,
        "range": range_command,
    }

    try:
        return commands[args.command](args, config)
    except (NotFoundError, InputValidationError, FileNotFoundError, ValueError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
