"""Command line interface for managing remote resources."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import threading
from signal import SIGINT, signal
from typing import TYPE_CHECKING, Any

from dotenv import load_dotenv

from convergent.app import (
    DEFAULT_DESTROY_WORKERS,
    create_resource,
    delete_resource,
    destroy_tracked,
    get_tracked,
    list_tracked,
    read_resource,
    snapshot_attributes,
    update_resource,
)
from convergent.config import ConfigurationError, configure_logging
from convergent.domain.errors import MalformedIdentifierError, WaitCancelledError
from convergent.domain.model import (
    AnomalyMonitorChanges,
    AnomalyMonitorSpec,
    ClusterEndpointChanges,
    ClusterEndpointSpec,
    MonitorType,
    ResourceKind,
)
from convergent.domain.ports.persistence import TrackedResourceNotFoundError
from convergent.domain.resources import DEFINITIONS

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from convergent.domain.lifecycle import LifecycleOutcome
    from convergent.domain.model import TrackedResource

log = logging.getLogger(__name__)

ENDPOINT_TYPES = ("READER", "WRITER", "ANY")
EXIT_CANCELLED = 130

_CANCEL = threading.Event()


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manage remote resources and wait for them")
    subparsers = parser.add_subparsers(dest="command", required=True)
    kinds = [kind.value for kind in ResourceKind]

    endpoint = subparsers.add_parser("endpoint", help="Neptune cluster endpoints")
    endpoint_sub = endpoint.add_subparsers(dest="endpoint_command", required=True)
    endpoint_create = endpoint_sub.add_parser("create", help="Create a cluster endpoint")
    endpoint_create.add_argument("--cluster-id", required=True, help="Parent cluster id")
    endpoint_create.add_argument("--endpoint-id", required=True, help="New endpoint id")
    endpoint_create.add_argument(
        "--type",
        dest="endpoint_type",
        required=True,
        choices=ENDPOINT_TYPES,
        help="Custom endpoint type",
    )
    _add_member_arguments(endpoint_create)
    endpoint_create.add_argument(
        "--tag",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Tag to attach to the endpoint (repeatable)",
    )
    endpoint_update = endpoint_sub.add_parser("update", help="Modify a cluster endpoint")
    endpoint_update.add_argument("identifier", help="CLUSTER-ID:CLUSTER-ENDPOINT-ID")
    endpoint_update.add_argument(
        "--type", dest="endpoint_type", choices=ENDPOINT_TYPES, help="Custom endpoint type"
    )
    _add_member_arguments(endpoint_update)

    monitor = subparsers.add_parser("monitor", help="Cost Explorer anomaly monitors")
    monitor_sub = monitor.add_subparsers(dest="monitor_command", required=True)
    monitor_create = monitor_sub.add_parser("create", help="Create an anomaly monitor")
    monitor_create.add_argument("--name", required=True, help="Monitor name")
    monitor_create.add_argument(
        "--type",
        dest="monitor_type",
        required=True,
        choices=[item.value for item in MonitorType],
        help="Monitor type",
    )
    monitor_create.add_argument("--dimension", help="Dimension for DIMENSIONAL monitors")
    monitor_create.add_argument(
        "--specification", help="JSON cost-category expression for CUSTOM monitors"
    )
    monitor_update = monitor_sub.add_parser("update", help="Rename an anomaly monitor")
    monitor_update.add_argument("identifier", help="Monitor ARN")
    monitor_update.add_argument("--name", help="New monitor name")

    for name, help_text in (
        ("read", "Refresh a resource from the control plane"),
        ("delete", "Delete a resource and wait until it is gone"),
        ("show", "Show the locally tracked record of a resource"),
    ):
        command = subparsers.add_parser(name, help=help_text)
        command.add_argument("kind", choices=kinds)
        command.add_argument("identifier")

    listing = subparsers.add_parser("list", help="List tracked resources")
    listing.add_argument("--kind", choices=kinds)

    destroy = subparsers.add_parser("destroy", help="Delete all tracked resources")
    destroy.add_argument("--kind", choices=kinds)
    destroy.add_argument(
        "--max-workers",
        type=int,
        default=DEFAULT_DESTROY_WORKERS,
        help="Number of deletions to run in parallel (default: %(default)s)",
    )

    return parser.parse_args(list(argv))


def _add_member_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--static-member",
        dest="static_members",
        action="append",
        help="Instance id to include in the endpoint (repeatable)",
    )
    parser.add_argument(
        "--excluded-member",
        dest="excluded_members",
        action="append",
        help="Instance id to exclude from the endpoint (repeatable)",
    )


def _parse_tags(values: Sequence[str]) -> dict[str, str]:
    tags: dict[str, str] = {}
    for value in values:
        key, separator, tag_value = value.partition("=")
        if not separator or not key.strip():
            raise ValueError(f"Invalid tag (expected KEY=VALUE): {value}")
        tags[key.strip()] = tag_value
    return tags


def _optional_members(values: Sequence[str] | None) -> frozenset[str] | None:
    return frozenset(values) if values is not None else None


def _parse_specification(value: str | None) -> str | None:
    if value is None:
        return None
    try:
        json.loads(value)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid monitor specification JSON: {exc}") from exc
    return value


def _validate(args: argparse.Namespace) -> None:
    if args.command in {"read", "delete", "show"}:
        DEFINITIONS[ResourceKind(args.kind)].identifier.decode(args.identifier)
    elif args.command == "endpoint":
        if args.endpoint_command == "create":
            _parse_tags(args.tag)
        else:
            DEFINITIONS[ResourceKind.CLUSTER_ENDPOINT].identifier.decode(args.identifier)
    elif args.command == "monitor":
        if args.monitor_command == "create":
            _parse_specification(args.specification)
        else:
            DEFINITIONS[ResourceKind.ANOMALY_MONITOR].identifier.decode(args.identifier)
    elif args.command == "destroy" and args.max_workers < 1:
        raise ValueError("--max-workers must be at least 1")


def _emit(payload: object) -> None:
    print(json.dumps(payload, indent=2, sort_keys=True))  # noqa: T201


def _print_outcome(outcome: LifecycleOutcome[Any]) -> None:
    payload: dict[str, object] = {
        "status": outcome.status.value,
        "identifier": outcome.identifier,
    }
    if outcome.snapshot is not None:
        payload["attributes"] = snapshot_attributes(outcome.snapshot)
    _emit(payload)


def _record_payload(record: TrackedResource) -> dict[str, object]:
    return {
        "kind": record.kind.value,
        "identifier": record.identifier,
        "status": record.status,
        "attributes": record.attributes,
        "updated_at": record.updated_at.isoformat(),
    }


def _dispatch(args: argparse.Namespace) -> int:
    command = args.command
    if command == "endpoint" and args.endpoint_command == "create":
        spec = ClusterEndpointSpec(
            cluster_identifier=args.cluster_id,
            endpoint_identifier=args.endpoint_id,
            endpoint_type=args.endpoint_type,
            static_members=frozenset(args.static_members or ()),
            excluded_members=frozenset(args.excluded_members or ()),
            tags=_parse_tags(args.tag),
        )
        _print_outcome(create_resource(ResourceKind.CLUSTER_ENDPOINT, spec, cancel=_CANCEL))
    elif command == "endpoint":
        changes = ClusterEndpointChanges(
            endpoint_type=args.endpoint_type,
            static_members=_optional_members(args.static_members),
            excluded_members=_optional_members(args.excluded_members),
        )
        _print_outcome(
            update_resource(
                ResourceKind.CLUSTER_ENDPOINT, args.identifier, changes, cancel=_CANCEL
            )
        )
    elif command == "monitor" and args.monitor_command == "create":
        spec = AnomalyMonitorSpec(
            name=args.name,
            monitor_type=MonitorType(args.monitor_type),
            dimension=args.dimension,
            specification=_parse_specification(args.specification),
        )
        _print_outcome(create_resource(ResourceKind.ANOMALY_MONITOR, spec, cancel=_CANCEL))
    elif command == "monitor":
        _print_outcome(
            update_resource(
                ResourceKind.ANOMALY_MONITOR,
                args.identifier,
                AnomalyMonitorChanges(name=args.name),
                cancel=_CANCEL,
            )
        )
    elif command == "read":
        _print_outcome(read_resource(ResourceKind(args.kind), args.identifier, cancel=_CANCEL))
    elif command == "delete":
        _print_outcome(delete_resource(ResourceKind(args.kind), args.identifier, cancel=_CANCEL))
    elif command == "show":
        record = get_tracked(ResourceKind(args.kind), args.identifier)
        _emit(_record_payload(record))
    elif command == "list":
        kind = ResourceKind(args.kind) if args.kind else None
        records = [_record_payload(record) for record in list_tracked(kind=kind)]
        _emit(records)
    elif command == "destroy":
        kind = ResourceKind(args.kind) if args.kind else None
        report = destroy_tracked(kind=kind, max_workers=args.max_workers, cancel=_CANCEL)
        for label, reason in sorted(report.failed.items()):
            log.error("Could not destroy %s: %s", label, reason)
        if not report.ok:
            return EXIT_CANCELLED if _CANCEL.is_set() else 1
    else:
        raise ValueError(f"Unsupported command: {command}")
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        configure_logging()
        parsed_args = _parse_args(args_list)
        _validate(parsed_args)
    except (ValueError, ConfigurationError, MalformedIdentifierError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        exit_code = _dispatch(parsed_args)
    except WaitCancelledError:
        log.warning("Cancelled by user")
        sys.exit(EXIT_CANCELLED)
    except TrackedResourceNotFoundError as exc:
        log.error("%s", exc)  # noqa: TRY400
        sys.exit(1)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)
    if exit_code:
        sys.exit(exit_code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Request cancellation of running waits; a second Ctrl+C aborts immediately."""
    if _CANCEL.is_set():
        raise KeyboardInterrupt
    log.info("Cancelling (Ctrl+C again to abort)")
    _CANCEL.set()


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
