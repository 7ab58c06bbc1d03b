#!/usr/bin/env python3
"""
Command-line interface for the zero trust flow playback engine.

Plays scenarios live in the terminal, walks through the login and MFA flow,
renders single frames and writes configuration files.

Copyright 2025 Firefly Software Solutions Inc
Licensed under the Apache License, Version 2.0
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.live import Live
from rich.table import Table

from ztflow import __version__
from ztflow.config.flow_config import (
    ConfigurationManager,
    FlowConfig,
    LoggingConfig,
    PlaybackConfig,
)
from ztflow.core.playback_state import PlaybackPhase, PlaybackState, terminal_status
from ztflow.core.topology import DEFAULT_TOPOLOGY, Scenario
from ztflow.engine.playback_engine import PlaybackController
from ztflow.events.playback_events import PlaybackEvent
from ztflow.exceptions import IndexOutOfRange, ZtFlowError
from ztflow.logging import setup_ztflow_logging, shutdown_ztflow_logging
from ztflow.session.controller import AuthOutcome, SessionController
from ztflow.visualization.renderer import FlowRenderer, OutputFormat

logger = logging.getLogger(__name__)


def build_config(
    config_path: Optional[str] = None,
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    speed: float = 1.0,
) -> FlowConfig:
    """Load configuration and apply command-line overrides."""
    config = ConfigurationManager.load_config(config_path)

    if log_level or log_format:
        config = config.model_copy(
            update={
                "logging": LoggingConfig(
                    **{
                        **config.logging.model_dump(),
                        **({"level": log_level} if log_level else {}),
                        **({"format": log_format} if log_format else {}),
                    }
                )
            }
        )

    if speed <= 0:
        raise ValueError(f"Speed must be positive, got {speed}")
    if speed != 1.0:
        interval = max(1, int(config.playback.step_interval_ms / speed))
        reveal = min(int(config.playback.arrow_reveal_delay_ms / speed), interval - 1)
        config = config.model_copy(
            update={
                "playback": PlaybackConfig(step_interval_ms=interval, arrow_reveal_delay_ms=reveal)
            }
        )

    return config


def setup_logging(config: FlowConfig) -> None:
    """Configure logging for the CLI."""
    shutdown_ztflow_logging()
    setup_ztflow_logging(config)
    for warning in config.validate_configuration():
        logger.warning(warning)


async def animate(
    controller: PlaybackController,
    renderer: FlowRenderer,
    console: Console,
    timeout: Optional[float] = None,
) -> PlaybackState:
    """Redraw the diagram on every playback event until the active run ends."""
    with Live(renderer.render_rich(controller.state), console=console, refresh_per_second=30) as live:

        def redraw(event: PlaybackEvent) -> None:
            live.update(renderer.render_rich(event.state))

        unsubscribe = controller.subscribe(redraw)
        try:
            await controller.wait_until_done(timeout)
        finally:
            unsubscribe()
        live.update(renderer.render_rich(controller.state))

    return controller.state


async def play_scenario(scenario: Scenario, config: FlowConfig, console: Console) -> PlaybackState:
    """Animate one scenario from the first step to the last."""
    controller = PlaybackController(config)
    renderer = FlowRenderer(controller.topology, config)
    controller.start(scenario)
    return await animate(controller, renderer, console)


async def run_login(
    username: str,
    password: str,
    mfa_code: Optional[str],
    config: FlowConfig,
    console: Console,
) -> SessionController:
    """Run the login form flow and animate whichever playback it starts."""
    session = SessionController(config=config)
    renderer = FlowRenderer(session.playback.topology, config)

    outcome = session.login(username, password)
    console.print(f"[bold]{session.status}[/bold]")

    if outcome is AuthOutcome.GRANTED:
        if mfa_code is None:
            console.print("[yellow]Pass --mfa CODE to complete the login[/yellow]")
            return session
        session.submit_mfa(mfa_code)
        console.print(f"[bold]{session.status}[/bold]")

    await animate(session.playback, renderer, console)
    style = "red" if session.status_is_failure else "green"
    console.print(f"[{style}]{session.status}[/{style}]")
    return session


def frame_state(scenario: Scenario, index: int, progress: float = 1.0) -> PlaybackState:
    """Playback state as it looks at a given step of a scenario."""
    last_index = DEFAULT_TOPOLOGY.last_index(scenario)
    if not -1 <= index <= last_index:
        raise IndexOutOfRange("step", index, last_index + 1)

    if index == last_index:
        return PlaybackState(
            scenario=scenario,
            current_step_index=index,
            phase=PlaybackPhase.DONE,
            arrow_progress=progress,
            status=terminal_status(scenario),
        )

    return PlaybackState(
        scenario=scenario,
        current_step_index=index,
        is_animating=index >= 0,
        phase=PlaybackPhase.RUNNING if index >= 0 else PlaybackPhase.IDLE,
        arrow_progress=progress,
    )


def show_frame(
    scenario: Scenario, index: int, format_type: str, progress: float, config: FlowConfig
) -> str:
    renderer = FlowRenderer(DEFAULT_TOPOLOGY, config)
    output = renderer.render(frame_state(scenario, index, progress), OutputFormat(format_type))
    print(output)
    return output


def show_topology(console: Console) -> None:
    """Print the nodes and both step tables."""
    topology = DEFAULT_TOPOLOGY

    nodes = Table(title="Nodes")
    nodes.add_column("ID", justify="right")
    nodes.add_column("Label")
    nodes.add_column("X", justify="right")
    nodes.add_column("Y", justify="right")
    for node in topology.nodes:
        nodes.add_row(str(node.id), node.label, f"{node.x:.0f}", f"{node.y:.0f}")
    console.print(nodes)

    for scenario in Scenario:
        steps = Table(title=f"{scenario.value.capitalize()} steps")
        steps.add_column("#", justify="right")
        steps.add_column("From")
        steps.add_column("To")
        steps.add_column("Direction")
        for index, step in enumerate(topology.steps_for(scenario)):
            steps.add_row(
                str(index),
                topology.node_at(step.source).label,
                topology.node_at(step.target).label,
                step.direction.value,
            )
        console.print(steps)


def create_sample_config(output_path: str) -> None:
    """Create a sample configuration file."""
    ConfigurationManager.create_default_config_file(output_path)
    print(f"Sample configuration written to {output_path}")


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ztflow",
        description="Zero trust flow playback engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  ztflow play success                  # Animate the 16-step success flow
  ztflow login admin password --mfa 123456
  ztflow frame failure 5 --format svg  # Render one frame as SVG
  ztflow init-config ztflow.yaml       # Write a default configuration
        """,
    )

    parser.add_argument("--version", action="version", version=f"ztflow {__version__}")
    parser.add_argument("--config", help="Configuration file (YAML or JSON)")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (overrides configuration)",
    )
    parser.add_argument(
        "--log-format",
        choices=["json", "text"],
        help="Log output format (overrides configuration)",
    )
    parser.add_argument(
        "--speed", type=float, default=1.0, help="Playback speed multiplier (default: 1.0)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    play_parser = subparsers.add_parser("play", help="Animate a scenario in the terminal")
    play_parser.add_argument("scenario", choices=[s.value for s in Scenario])

    login_parser = subparsers.add_parser("login", help="Run the login and MFA flow")
    login_parser.add_argument("username")
    login_parser.add_argument("password")
    login_parser.add_argument("--mfa", dest="mfa_code", help="MFA code")

    frame_parser = subparsers.add_parser("frame", help="Render a single frame")
    frame_parser.add_argument("scenario", choices=[s.value for s in Scenario])
    frame_parser.add_argument("index", type=int, help="Step index (-1 for not started)")
    frame_parser.add_argument(
        "--format",
        choices=[f.value for f in OutputFormat],
        default="ascii",
        help="Output format",
    )
    frame_parser.add_argument(
        "--progress", type=float, default=1.0, help="Arrow progress in [0, 1]"
    )

    subparsers.add_parser("topology", help="Show nodes and step tables")

    init_parser = subparsers.add_parser("init-config", help="Create sample configuration file")
    init_parser.add_argument("output", help="Output configuration file path")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    try:
        config = build_config(args.config, args.log_level, args.log_format, args.speed)
    except ValueError as e:
        print(f"❌ Invalid configuration: {e}", file=sys.stderr)
        return 2

    setup_logging(config)
    console = Console()

    try:
        if args.command == "play":
            final = asyncio.run(play_scenario(Scenario.parse(args.scenario), config, console))
            return 0 if final.is_done else 1

        elif args.command == "login":
            session = asyncio.run(
                run_login(args.username, args.password, args.mfa_code, config, console)
            )
            return 1 if session.status_is_failure else 0

        elif args.command == "frame":
            show_frame(
                Scenario.parse(args.scenario), args.index, args.format, args.progress, config
            )

        elif args.command == "topology":
            show_topology(console)

        elif args.command == "init-config":
            create_sample_config(args.output)

    except (ZtFlowError, ValueError) as e:
        logger.error(f"Command failed: {e}", extra={"command": args.command})
        print(f"❌ {e}", file=sys.stderr)
        return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
