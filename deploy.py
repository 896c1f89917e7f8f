#!/usr/bin/env python3
"""
Stack Deployer

Entry point for deploying a single CloudFormation stack through a change set.
Parses arguments, builds the AWS clients once and hands them to the
deployment orchestrator.
"""

import argparse
import json
import logging
import signal
import sys
import threading
from pathlib import Path
from typing import Dict, List

from botocore.exceptions import BotoCoreError

import config
from stack_deployer.aws_clients import (
    create_cloudformation_client,
    create_session,
    create_sts_client,
)
from stack_deployer.change_set_manager import ChangeSetManager
from stack_deployer.cloudformation_gateway import CloudFormationGateway
from stack_deployer.deployment_orchestrator import DeploymentOrchestrator, whoami
from stack_deployer.errors import DeploymentError
from stack_deployer.models import Deployment, DeployResult
from stack_deployer.progress_indicator import ProgressIndicator
from stack_deployer.stack_monitor import StackMonitor

EXIT_CODES = {
    DeployResult.COMPLETED: 0,
    DeployResult.NO_CHANGE: 0,
    DeployResult.ABORTED: 0,
    DeployResult.CLEANED_UP: 0,
    DeployResult.ROLLED_BACK: 1,
}


def parse_parameters(pairs: List[str], files: List[str]) -> Dict[str, str]:
    """
    Merge parameter files and KEY=VALUE pairs; later values win.
    Parameter files hold either a JSON object or a CloudFormation style list
    of ParameterKey/ParameterValue entries.
    """
    parameters: Dict[str, str] = {}

    for path in files:
        content = json.loads(Path(path).read_text())
        if isinstance(content, dict):
            parameters.update({str(k): str(v) for k, v in content.items()})
        else:
            for entry in content:
                parameters[entry["ParameterKey"]] = str(entry["ParameterValue"])

    for pair in pairs:
        key, separator, value = pair.partition("=")
        if not separator or not key:
            raise ValueError(f"expected KEY=VALUE, got: {pair}")
        parameters[key] = value

    return parameters


def read_template(path: str) -> bytes:
    """Read a template file. Raises ValueError when it is not UTF-8 text."""
    body = Path(path).read_bytes()
    body.decode("utf-8")
    return body


def interrupt_handler(cancel_event: threading.Event, progress: ProgressIndicator):
    """
    SIGINT handler for a running deployment.
    The first Ctrl-C asks the polling loops to stop at their next check;
    a second one interrupts immediately.
    """

    def handle(signum, frame):
        if cancel_event.is_set():
            raise KeyboardInterrupt
        cancel_event.set()
        progress.newline()
        progress.warning("Cancelling... press Ctrl-C again to stop immediately.")

    return handle


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Deploy a CloudFormation stack through a change set",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("-r", "--region", default=config.AWS_REGION, help="AWS region")
    parser.add_argument(
        "-p", "--profile", default=config.AWS_PROFILE, help="AWS credential profile"
    )
    parser.add_argument(
        "-e", "--endpoint", default=config.AWS_ENDPOINT_URL, help="AWS API endpoint"
    )
    parser.add_argument(
        "--color",
        choices=["on", "off"],
        default="on",
        help="'on' or 'off'. pass 'off' to disable colors.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    parser.add_argument(
        "--whoami",
        action="store_true",
        help="show the AWS identity in use and exit",
    )
    parser.add_argument("-n", "--stack-name", help="stack to create or update")
    parser.add_argument("-t", "--template-file", help="template file")
    parser.add_argument(
        "-P",
        "--parameter",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="explicit parameter (repeatable)",
    )
    parser.add_argument(
        "--parameter-file",
        action="append",
        default=[],
        help="path to a JSON parameter file (repeatable)",
    )
    parser.add_argument(
        "--tag",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="stack tag (repeatable)",
    )
    parser.add_argument(
        "-d",
        "--diff",
        action="store_true",
        help="show template diff when updating a stack",
    )
    parser.add_argument(
        "--protected",
        action="store_true",
        help="ask for confirmation before executing the change set",
    )
    parser.add_argument(
        "-y", "--yes", action="store_true", help="do not prompt for confirmation"
    )
    return parser


def main(argv=None) -> int:
    """
    Main function to parse arguments and run the deployment.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    progress = ProgressIndicator(color=args.color == "on", assume_yes=args.yes)
    try:
        session = create_session(args.profile, args.region)
    except BotoCoreError as e:
        progress.error(f"create aws session: {e}")
        return 1

    if args.whoami:
        try:
            whoami(create_sts_client(session, args.endpoint), progress, args.region)
        except DeploymentError as e:
            progress.error(str(e))
            return 1
        return 0

    if not args.stack_name or not args.template_file:
        parser.error("--stack-name and --template-file are required")

    try:
        deployment = Deployment(
            stack_name=args.stack_name,
            template_body=read_template(args.template_file),
            parameters=parse_parameters(args.parameter, args.parameter_file),
            tags=parse_parameters(args.tag, []),
            protected=args.protected,
            region=args.region,
        )
    except (OSError, ValueError, KeyError) as e:
        progress.error(f"load deployment: {e}")
        return 1

    cancel_event = threading.Event()
    gateway = CloudFormationGateway(
        create_cloudformation_client(session, args.region, args.endpoint)
    )
    orchestrator = DeploymentOrchestrator(
        gateway,
        deployment,
        progress,
        show_diff=args.diff,
        change_sets=ChangeSetManager(
            gateway, timeout=config.CHANGE_SET_TIMEOUT, cancel_event=cancel_event
        ),
        monitor=StackMonitor(
            gateway,
            progress,
            timeout=config.STACK_OPERATION_TIMEOUT,
            cancel_event=cancel_event,
        ),
    )

    previous_handler = signal.signal(
        signal.SIGINT, interrupt_handler(cancel_event, progress)
    )
    try:
        result = orchestrator.deploy()
    except KeyboardInterrupt:
        cancel_event.set()
        progress.warning("Operation cancelled by user.")
        return 1
    except DeploymentError as e:
        if cancel_event.is_set():
            progress.warning("Operation cancelled by user.")
        progress.error(str(e))
        return 1
    finally:
        signal.signal(signal.SIGINT, previous_handler or signal.default_int_handler)

    return EXIT_CODES[result]


if __name__ == "__main__":
    sys.exit(main())
