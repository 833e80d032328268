import click
import asyncio
from pathlib import Path

from .config import ConfigManager
from .security.capabilities import find_prerequisite_failure
from .security.models import CapabilitySet, Diagnostic, ScanMode, ScanRequest
from .security.progress import ProgressDecoder
from .security.scanner import ScanOrchestrator
from .security.tool_manager import ToolManager


class EchoSink:
    """Prints scan events to the terminal as they arrive."""

    def progress_report(self, rule_id: str, result: str) -> None:
        click.echo(f"{rule_id}: {result}")

    def warning_message(self, text: str) -> None:
        click.echo(f"WARNING: {text}", err=True)

    def error_message(self, text: str) -> None:
        click.echo(f"ERROR: {text}", err=True)

    def scan_finished(self, canceled: bool) -> None:
        click.echo("Scan canceled." if canceled else "Scan finished.")


def _load_config(ctx) -> ConfigManager:
    try:
        config_manager = ConfigManager(ctx.obj['config'])
    except FileNotFoundError as e:
        raise click.ClickException(f"{e}. Copy config.example.yaml to get started.")
    config_manager.setup_logging()
    return config_manager


def request_options(func):
    """Options shared by commands that describe a scan request."""
    options = [
        click.option('--mode', '-m',
                     type=click.Choice([m.value for m in ScanMode]),
                     default=ScanMode.ONLINE_SCAN.value, help='Scan mode'),
        click.option('--input', '-i', 'input_file', required=True,
                     help='XCCDF/SDS input, or the ARF to remediate offline'),
        click.option('--results', 'result_file', default='results.xml', help='XCCDF results path'),
        click.option('--report', 'report_file', default='report.html', help='HTML report path'),
        click.option('--arf', 'arf_file', default='results-arf.xml', help='ARF results path'),
        click.option('--profile', '-p', help='Profile ID'),
        click.option('--sds/--no-sds', default=False, help='Input is a source datastream'),
        click.option('--datastream-id', help='Datastream ID inside the source datastream'),
        click.option('--xccdf-id', help='XCCDF component ID inside the source datastream'),
        click.option('--tailoring-file', help='Tailoring file path'),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _build_request(mode, input_file, result_file, report_file, arf_file,
                   profile, sds, datastream_id, xccdf_id, tailoring_file) -> ScanRequest:
    return ScanRequest(
        mode=ScanMode(mode),
        is_source_datastream=sds,
        datastream_id=datastream_id,
        component_id=xccdf_id,
        has_tailoring=bool(tailoring_file),
        tailoring_file_path=tailoring_file,
        profile_id=profile,
        input_file_path=input_file,
        result_file_path=result_file,
        report_file_path=report_file,
        arf_file_path=arf_file,
    )


@click.group()
@click.option('--config', '-c', default='config.yaml', help='Configuration file path')
@click.pass_context
def cli(ctx, config):
    """SCAP scan driver CLI"""
    ctx.ensure_object(dict)
    ctx.obj['config'] = config


@cli.command()
@request_options
@click.option('--dry-run', is_flag=True, help='Print the oscap command without running it')
@click.pass_context
def scan(ctx, dry_run, **request_args):
    """Run an oscap scan and stream its progress"""
    config_manager = _load_config(ctx)
    request = _build_request(**request_args)

    orchestrator = ScanOrchestrator(
        capabilities=config_manager.get_capabilities(),
        tool_manager=ToolManager(config_manager.get_section('oscap')),
        sink=EchoSink(),
        config=config_manager.get_scan_config(),
    )
    result = asyncio.run(orchestrator.run(request, dry_run=dry_run))

    if dry_run:
        click.echo(result.raw_output)
    click.echo(f"Status: {result.status.value}")
    click.echo(f"Rules reported: {result.events_count}")
    if result.error_message:
        raise click.ClickException(result.error_message)


@cli.command()
@request_options
@click.pass_context
def check(ctx, **request_args):
    """Check whether the installed oscap can run a scan"""
    config_manager = _load_config(ctx)
    capabilities = config_manager.get_capabilities()
    failure = find_prerequisite_failure(capabilities, _build_request(**request_args))

    if failure is not None:
        raise click.ClickException(str(failure))
    click.echo(f"oscap {capabilities.version} supports this scan.")


@cli.command()
@click.argument('output_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--chunk-size', default=4096, type=click.IntRange(min=1),
              help='Bytes fed to the decoder per call')
def decode(output_file, chunk_size):
    """Decode captured `oscap --progress` stdout"""
    decoder = ProgressDecoder(CapabilitySet(progress_reporting=True))
    data = Path(output_file).read_bytes()

    events = 0
    for offset in range(0, len(data), chunk_size):
        for output in decoder.feed(data[offset:offset + chunk_size]):
            if isinstance(output, Diagnostic):
                click.echo(f"WARNING: {output.message}", err=True)
            else:
                events += 1
                click.echo(f"{output.rule_id}: {output.result}")

    if decoder.state.buffer or not decoder.state.reading_rule_id:
        click.echo("WARNING: output ends with an incomplete record", err=True)
    click.echo(f"{events} rules decoded")


@cli.command()
@click.pass_context
def tools(ctx):
    """Show where oscap is and what it supports"""
    config_manager = _load_config(ctx)
    tool = ToolManager(config_manager.get_section('oscap')).check_tool()
    capabilities = config_manager.get_capabilities()

    click.echo(f"oscap: {tool.path if tool.installed else 'not found'}")
    click.echo(f"Version: {capabilities.version or 'unknown'}")
    for name, value in capabilities.model_dump(exclude={'version'}).items():
        click.echo(f"  {name}: {'yes' if value else 'no'}")


if __name__ == '__main__':
    cli()
