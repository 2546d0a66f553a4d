# src/diggeo/cli.py

from dotenv import load_dotenv
load_dotenv()

import sys

import click
from rich.console import Console
from rich.markup import escape

from diggeo.core_runner import CoreRunner, DEFAULT_JOBS, EXIT_CONFIG, EXIT_TARGET_FAILED, EXIT_USAGE
from diggeo.errors import ConfigError
from diggeo.modules.dns_resolve import DomainResolver
from diggeo.modules.geoip_lookup import GeoClient
from diggeo.utils.config import FileConfigSource, api_url, load_api_key, request_timeout, resolve_config_path
from diggeo.utils.inputs import collect_targets, stream_is_interactive
from diggeo.utils.logger_manager import setup_logger

err_console = Console(stderr=True, highlight=False, emoji=False, soft_wrap=True)

USAGE_EXAMPLES = """Usage examples:
  diggeo 8.8.8.8 1.1.1.1
  cat ips.txt | diggeo
  diggeo --dig example.com"""


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("ips", nargs=-1)
@click.option("--dig", "domain", metavar="DOMAIN", help="Resolve DOMAIN and look up every address it resolves to.")
@click.option("--ipv4", "ipv4_only", is_flag=True, help="With --dig, only use A records.")
@click.option("-j", "--jobs", type=click.IntRange(min=1), default=DEFAULT_JOBS, show_default=True,
              help="Number of lookups to run in parallel.")
@click.option("--timeout", type=click.FloatRange(min=0, min_open=True), default=None,
              help="Per-request timeout in seconds (falls back to DIGGEO_TIMEOUT, then 10).")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None,
              help="Config file holding `api_key = ...` (falls back to DIGGEO_CONFIG, then /etc/diggeo.conf).")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging on stderr.")
@click.version_option(package_name="diggeo")
@click.pass_context
def cli(ctx, ips, domain, ipv4_only, jobs, timeout, config_path, verbose):
    """Look up the geolocation of IP addresses, or of the addresses a domain resolves to.

    IPs are taken from the arguments, or one per line from stdin when none are given.
    """
    try:
        logger = setup_logger(verbose=verbose)
    except ConfigError as e:
        err_console.print(f"[bold red]Error setting up logging:[/bold red] {escape(str(e))}")
        ctx.exit(EXIT_CONFIG)

    if domain is not None and ips:
        raise click.UsageError("--dig cannot be combined with IP arguments")

    # the key is loaded before any input is read or any request is made
    source = FileConfigSource(resolve_config_path(config_path))
    try:
        api_key = load_api_key(source)
        timeout = request_timeout(timeout)
    except ConfigError as e:
        logger.debug(f"[CONFIG] {e}")
        err_console.print(f"[bold red]Error reading API key:[/bold red] {escape(str(e))}")
        ctx.exit(EXIT_CONFIG)

    stdin = None
    if domain is None and not ips:
        stdin = sys.stdin
        if stream_is_interactive(stdin):
            click.echo(USAGE_EXAMPLES, err=True)
            ctx.exit(EXIT_USAGE)

    with GeoClient(api_key, base_url=api_url(), timeout=timeout) as client:
        runner = CoreRunner(client, resolver=DomainResolver(lifetime=timeout), jobs=jobs)
        if domain is not None:
            tasks = runner.plan_dig(domain, ipv4_only=ipv4_only)
        else:
            try:
                targets = collect_targets(ips, stdin)
            except (UnicodeDecodeError, OSError) as e:
                err_console.print(f"[bold red]Error reading piped input:[/bold red] {escape(str(e))}")
                ctx.exit(EXIT_TARGET_FAILED)
            tasks = runner.plan_direct(targets)
        summary = runner.run(tasks)

    ctx.exit(summary.exit_code)


def main():
    cli(prog_name="diggeo")


if __name__ == "__main__":
    main()
