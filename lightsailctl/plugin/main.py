"""
Plugin for the AWS CLI lightsail subcommand.

AWS CLI runs `lightsailctl --plugin --input <payload>` (or passes the
payload on stdin with `--input-stdin`), where the payload is a JSON
document naming the operation to run.
"""

__all__ = [
    "invoke_operation",
    "lightsail_params",
    "parse_input",
    "parse_push_container_image_payload",
    "plugin_main",
]

import argparse
import logging
import re
import sys
from typing import Any

from lightsailctl.container_service import PushOrchestrator, PushRequest
from lightsailctl.container_service.exceptions import PlatformMismatchError
from lightsailctl.container_service.providers import DockerEngine, Lightsail
from lightsailctl.core import VERSION, Context
from lightsailctl.core._log_helper import set_debug
from lightsailctl.core.exceptions import BadRequestError, NotSupportedError

from ._models import OperationConfig, PluginInput, PushContainerImagePayload
from .update_check import check_for_updates

logger = logging.getLogger(__name__)

PUSH_CONTAINER_IMAGE = "PushContainerImage"

_INPUT_VERSION_RE = re.compile(r"^[+-]?\d+$")


def plugin_main(progname: str, args: list[str]) -> int:
    parser = argparse.ArgumentParser(prog=progname)
    parser.add_argument(
        "-input",
        "--input",
        dest="input",
        default="",
        metavar="payload",
        help="plugin payload",
    )
    parser.add_argument(
        "-input-stdin",
        "--input-stdin",
        dest="input_stdin",
        action="store_true",
        help="receive plugin payload on stdin",
    )
    parsed = parser.parse_args(args)
    if not parsed.input and not parsed.input_stdin:
        parser.print_usage(sys.stderr)
        logger.error(
            'no plugin input: either "input" or "input-stdin" flag must be '
            "specified"
        )
        return 1

    raw = sys.stdin.read() if parsed.input_stdin else parsed.input
    try:
        plugin_input = parse_input(raw)
    except BadRequestError as e:
        logger.error("invalid plugin input: %s", e)
        return 1

    set_debug(plugin_input.configuration.debug)
    try:
        invoke_operation(plugin_input)
    except PlatformMismatchError as e:
        logger.error("%s", e)
        logger.error(
            "Rebuild the image for %s, for example with "
            "`docker build --platform %s`, and push it again.",
            e.platform,
            e.platform,
        )
        return 1
    except Exception as e:
        logger.error("%s", e)
        return 1
    return 0


def parse_input(raw: str | bytes) -> PluginInput:
    try:
        plugin_input = PluginInput.from_json(raw)
    except ValueError as e:
        raise BadRequestError(f"unable to unmarshal JSON input: {e}") from e
    version = plugin_input.input_version
    if not _INPUT_VERSION_RE.match(version) or int(version) < 0:
        raise BadRequestError(
            "invalid inputVersion: it must contain a non-negative number"
        )
    return plugin_input


def lightsail_params(config: OperationConfig) -> dict[str, Any]:
    params: dict[str, Any] = dict(
        region=config.region or None,
        profile_name=config.profile or None,
        endpoint_url=config.endpoint.rstrip("/") or None,
    )
    if config.do_not_verify_ssl:
        params["verify"] = False
    elif config.ca_bundle:
        try:
            with open(config.ca_bundle, "rb"):
                pass
        except OSError as e:
            raise BadRequestError(f"read CA bundle file: {e}") from e
        params["verify"] = config.ca_bundle
    return params


def invoke_operation(
    plugin_input: PluginInput,
    context: Context | None = None,
) -> None:
    context = context or Context()
    if plugin_input.operation != PUSH_CONTAINER_IMAGE:
        raise NotSupportedError(
            f'unknown plugin operation: "{plugin_input.operation}"'
        )

    lightsail = Lightsail(**lightsail_params(plugin_input.configuration))
    check_for_updates(lightsail, VERSION, context)
    try:
        request = parse_push_container_image_payload(plugin_input.payload)
    except BadRequestError as e:
        raise BadRequestError(
            f"unable to parse the input's payload field: {e}"
        ) from e

    engine = DockerEngine()
    engine.__setup__(context)
    try:
        PushOrchestrator(lightsail, engine).push(request, context)
    finally:
        engine.close()
        lightsail.close()


def parse_push_container_image_payload(payload: Any) -> PushRequest:
    try:
        parsed = PushContainerImagePayload.from_dict(
            payload if payload is not None else {}
        )
    except ValueError as e:
        raise BadRequestError(str(e)) from e
    for what, value in (
        ("service name", parsed.service),
        ("container image", parsed.image),
        ("container label", parsed.label),
    ):
        if not value:
            raise BadRequestError(
                f"push container image: {what} is not specified"
            )
    return PushRequest(
        service_name=parsed.service,
        local_image_reference=parsed.image,
        label=parsed.label,
    )
