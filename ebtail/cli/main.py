"""Main CLI entrypoint for ebtail."""

import json
import logging
import sys
import time
from typing import Any, Dict, List, Optional

import click

from ..config import build_client, build_session, load_settings
from ..correlate import correlate, find_log_group
from ..discovery import discover
from ..errors import EbtailError
from ..models import CorrelatedEvent
from ..obs import CloudWatchLinkBuilder, LiveTailSession

logger = logging.getLogger(__name__)

IDLE_POLL_SECONDS = 5


def _json_output(data: Any) -> None:
    """Output data as JSON."""
    print(json.dumps(data, indent=None))


def _fatal(error: EbtailError) -> None:
    """Report a fatal error with the stage it came from and exit."""
    click.echo(f"❌ [{error.stage}] {error}", err=True)
    sys.exit(1)


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    # botocore is chatty at DEBUG
    logging.getLogger("botocore").setLevel(logging.WARNING)


def _print_events_human(events: List[CorrelatedEvent], function_count: int, rule_count: int) -> None:
    """Print the correlated-event table and counts."""
    for i, event in enumerate(events):
        click.echo(
            f"{i}: Event Name: {click.style(event.event_name, fg='green')}, "
            f"Bus: {event.bus_name}, Function: {event.function_name}, LogGroup: {event.log_group}"
        )
    click.echo(f"Found {rule_count} events in current session")
    click.echo(f"Found {function_count} functions in current session")


def _events_json(events: List[CorrelatedEvent], links: CloudWatchLinkBuilder,
                 function_count: int, rule_count: int) -> Dict[str, Any]:
    return {
        "events": [
            {
                **event.to_dict(),
                "links": links.build_event_links(event),
                "tail_command": links.build_tail_command(event.log_group),
            }
            for event in events
        ],
        "rule_count": rule_count,
        "function_count": function_count,
    }


def _wait_for_stream(session: LiveTailSession) -> None:
    """Block until streaming ends; re-raise a fatal streaming failure."""
    session.finished.wait()
    if session.failure is not None:
        raise session.failure


def _idle_forever() -> None:
    while True:
        time.sleep(IDLE_POLL_SECONDS)


@click.command()
@click.option('--event', '-e', 'event_name', help='Name of the event to start tailing')
@click.option('--verbose', '-v', is_flag=True, help='Print every correlated event and counts')
@click.option('--json', 'output_json', is_flag=True, help='Output the event table as JSON (requires --verbose)')
@click.option('--region', help='AWS region (default: us-east-2)')
@click.option('--bus', 'buses', multiple=True, help='Event bus to scan (repeatable)')
@click.option('--max-workers', type=int, help='Concurrent AWS calls per inventory')
@click.option('--config', 'config_path', type=click.Path(dir_okay=False), help='YAML settings file')
@click.option('--debug', is_flag=True, help='Enable debug logging')
def main(event_name: Optional[str], verbose: bool, output_json: bool, region: Optional[str],
         buses: tuple, max_workers: Optional[int], config_path: Optional[str], debug: bool):
    """Tail the logs of the Lambda function behind an EventBridge event."""
    _configure_logging(debug)

    if not event_name and not verbose:
        raise click.UsageError("Provide --event, or --verbose to list events")
    if output_json and not verbose:
        raise click.UsageError("--json only applies together with --verbose")

    try:
        settings = load_settings(config_path).with_overrides(
            region=region, bus_names=buses, max_workers=max_workers,
        )
        session = build_session(settings)
        lambda_client = build_client(session, "lambda")
        events_client = build_client(session, "events")
        logs_client = build_client(session, "logs")

        inventory = discover(settings, lambda_client, events_client)
        events = correlate(inventory.functions, inventory.rules)

        if verbose:
            if output_json:
                links = CloudWatchLinkBuilder(settings.region)
                _json_output(_events_json(events, links, len(inventory.functions), len(inventory.rules)))
            else:
                _print_events_human(events, len(inventory.functions), len(inventory.rules))

        if not event_name:
            click.echo("❌ No event provided, exiting...", err=True)
            sys.exit(1)

        log_group = find_log_group(events, event_name)
        logger.info(f"Tailing {log_group} for event {event_name}")

        tail = LiveTailSession(logs_client, log_group, on_line=click.echo)
        tail.start_background()
        _wait_for_stream(tail)
    except EbtailError as e:
        _fatal(e)

    _idle_forever()


if __name__ == '__main__':
    main()
