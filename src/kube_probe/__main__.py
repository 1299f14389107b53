"""Entry point for the kube-probe command line."""

import argparse
import logging
import sys
from typing import Any

from kube_probe import __version__
from kube_probe.config import LogLevel, ProbeConfig
from kube_probe.controls.models import ControlRequest
from kube_probe.models.common import ResourceKind
from kube_probe.probe import Probe
from kube_probe.utils.errors import ProbeError

CLI_APP_ID = "kube-probe-cli"


def setup_logging(level: LogLevel) -> None:
    """Configure logging for the probe."""
    logging.basicConfig(
        level=level.value,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="kube-probe",
        description="Dispatch probe controls against Kubernetes resources",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    # Cluster options
    parser.add_argument(
        "--kubeconfig",
        default=None,
        help="Path to kubeconfig file",
    )
    parser.add_argument(
        "--context",
        default=None,
        help="Kubeconfig context to use",
    )

    # Safety options
    parser.add_argument(
        "--read-only",
        action="store_true",
        help="Refuse controls that change cluster state",
    )

    # Logging
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: INFO)",
    )

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("controls", help="List the registered control ids")

    nodes = commands.add_parser("nodes", help="List node ids of cached resources")
    nodes.add_argument(
        "--kind",
        choices=[kind.value for kind in ResourceKind],
        default=None,
        help="Only list resources of this kind",
    )

    control = commands.add_parser("control", help="Dispatch a control to a node")
    control.add_argument("control_id", help="Control identifier, e.g. kubernetes_get_logs")
    control.add_argument("node_id", help="Target node identifier")

    return parser.parse_args(argv)


def _list_controls(probe: Probe) -> int:
    for control in probe.registry.controls:
        print(control)
    return 0


def _list_nodes(probe: Probe, kind: str | None) -> int:
    probe.refresh_cache()
    kinds = [ResourceKind(kind)] if kind else list(ResourceKind)
    for resource_kind in kinds:
        for handle in probe.cache.walk(resource_kind):
            print(f"{handle.node_id}\t{handle.namespace or '-'}\t{handle.name}")
    return 0


def _run_control(probe: Probe, control: str, node_id: str) -> int:
    logger = logging.getLogger(__name__)

    probe.refresh_cache()
    probe.pipes.open_session(CLI_APP_ID)
    try:
        response = probe.dispatch(ControlRequest(app_id=CLI_APP_ID, node_id=node_id, control=control))
        if response.error is not None:
            logger.error(response.error)
            return 1
        if response.value is not None:
            print(response.value)
        if response.removed_node is not None:
            print(f"removed {response.removed_node}")
        if response.pipe is not None:
            pipe = probe.pipes.get(response.pipe)
            if pipe is None:
                logger.error(f"Pipe {response.pipe} closed before it could be read")
                return 1
            out = sys.stdout.buffer
            while not pipe.closed:
                data = pipe.read(probe.config.pipe_read_size)
                if data:
                    out.write(data)
                    out.flush()
        return 0
    finally:
        probe.pipes.close_session(CLI_APP_ID)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # Build config from args, falling back to environment/defaults
    config_kwargs: dict[str, Any] = {}

    if args.kubeconfig:
        config_kwargs["kubeconfig_path"] = args.kubeconfig

    if args.context:
        config_kwargs["kubeconfig_context"] = args.context

    if args.read_only:
        config_kwargs["read_only_mode"] = True

    if args.log_level:
        config_kwargs["log_level"] = LogLevel(args.log_level)

    config = ProbeConfig(**config_kwargs)

    setup_logging(config.log_level)

    logger = logging.getLogger(__name__)
    logger.debug(f"Starting kube-probe v{__version__}")

    try:
        warnings = config.validate_auth_config()
        for warning in warnings:
            logger.warning(warning)
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    try:
        with Probe(config) as probe:
            if args.command == "controls":
                return _list_controls(probe)
            if args.command == "nodes":
                return _list_nodes(probe, args.kind)
            return _run_control(probe, args.control_id, args.node_id)
    except ProbeError as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
