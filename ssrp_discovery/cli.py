"""CLI entry point for SSRP discovery.

    ssrp-discovery [options]
    python -m ssrp_discovery.cli [options]
"""

import json
import logging
import sys
import time
from pathlib import Path
from typing import Optional

import click

from .client import DEFAULT_RECEIVE_TIMEOUT_MS, DEFAULT_WAIT_TIMEOUT_MS, SSRPClient
from .errors import TransportError
from .reporting import ScanReporter, instance_rows, render_table
from .transport.udp_transport import BROADCAST_ADDRESS, SQL_BROWSER_PORT

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Server browsers tend to ignore probes that follow each other too closely
DEFAULT_SCAN_DELAY = 5.0


@click.command()
@click.option("--wait-timeout", type=click.IntRange(min=0), default=DEFAULT_WAIT_TIMEOUT_MS,
              show_default=True, help="Total time in ms to listen for responses.")
@click.option("--receive-timeout", type=click.IntRange(min=1), default=DEFAULT_RECEIVE_TIMEOUT_MS,
              show_default=True, help="Longest single wait for a response in ms.")
@click.option("--broadcast-address", default=BROADCAST_ADDRESS, show_default=True,
              help="Destination of the probe.")
@click.option("--port", type=click.IntRange(1, 65535), default=SQL_BROWSER_PORT,
              show_default=True, help="SQL Server Browser UDP port.")
@click.option("--format", "output_format", type=click.Choice(["table", "json", "yaml"]),
              default="table", show_default=True, help="Output format.")
@click.option("--scans", type=click.IntRange(min=1), default=1, show_default=True,
              help="Number of scans to run.")
@click.option("--delay", type=click.FloatRange(min=0), default=DEFAULT_SCAN_DELAY,
              show_default=True, help="Seconds to wait between scans.")
@click.option("--save-report", type=click.Path(dir_okay=False, path_type=Path),
              default=None, help="Save the JSON report to this file.")
@click.option("-v", "--verbose", is_flag=True, help="Log every datagram.")
def main(
    wait_timeout: int,
    receive_timeout: int,
    broadcast_address: str,
    port: int,
    output_format: str,
    scans: int,
    delay: float,
    save_report: Optional[Path],
    verbose: bool,
):
    """Discover SQL Server instances on the local network."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )

    reporter = ScanReporter()
    target = f"{broadcast_address}:{port}"
    reports = []
    start_time = time.time()

    try:
        with SSRPClient(
            wait_timeout=wait_timeout,
            receive_timeout=receive_timeout,
            broadcast_address=broadcast_address,
            port=port,
        ) as client:
            for i in range(scans):
                if i > 0:
                    time.sleep(delay)

                with client.scan() as scan:
                    instances = list(scan)

                report = reporter.generate(instances, scan.stats, target=target)
                reports.append(report)
                output_report(reporter, report, instances, output_format)

    except KeyboardInterrupt:
        duration_ms = int((time.time() - start_time) * 1000)
        output_error("Scan interrupted by user", duration_ms=duration_ms)
        sys.exit(130)

    except TransportError as e:
        duration_ms = int((time.time() - start_time) * 1000)
        output_error(f"Scan failed: {e}", duration_ms=duration_ms)
        sys.exit(1)

    if save_report:
        saved = reporter.save(
            reports[0] if len(reports) == 1 else {"scans": reports},
            save_report,
        )
        click.echo(f"Report saved: {saved}", err=True)


def output_report(reporter: ScanReporter, report: dict, instances, output_format: str):
    """Print one scan's results in the requested format."""
    if output_format == "json":
        click.echo(reporter.to_json_string(reporter.generate_envelope(report), pretty=False))
    elif output_format == "yaml":
        click.echo(reporter.to_yaml_string(report), nl=False)
    else:
        click.echo(render_table(instance_rows(instances)))
        click.echo(f"\n{len(instances)} instance(s) found")


def output_error(message: str, **extra):
    """Output error as a JSON envelope."""
    output = {
        "success": False,
        "command": "scan",
        "data": extra or None,
        "message": message,
    }
    click.echo(json.dumps(output, ensure_ascii=False))


if __name__ == "__main__":
    main()
