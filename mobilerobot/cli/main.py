"""
mobilerobot CLI - poke at an Android device from the command line.
"""

import asyncio
import json
import logging
from functools import wraps

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from mobilerobot.config_manager import RobotConfig, load_config
from mobilerobot.models import Button, Orientation, SwipeDirection
from mobilerobot.tools import (
    ActionableError,
    AndroidDeviceManager,
    AndroidRobot,
    CommandError,
)

console = Console()


def configure_logging(debug: bool) -> logging.Handler:
    logger = logging.getLogger("mobilerobot")
    logger.handlers = []

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s: %(message)s", "%H:%M:%S")
        if debug
        else logging.Formatter("%(message)s")
    )
    logger.addHandler(handler)

    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    logger.propagate = False
    return handler


def coro(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        return asyncio.run(f(*args, **kwargs))

    return wrapper


def reports_errors(f):
    """Print robot failures in red and exit non-zero instead of a traceback."""

    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except ActionableError as e:
            console.print(f"[red]{escape(str(e))}[/]")
            raise SystemExit(1)
        except CommandError as e:
            console.print(f"[red]{escape(str(e))}[/]")
            if e.output:
                console.print(e.output, markup=False)
            raise SystemExit(1)

    return wrapper


async def _resolve_robot(config: RobotConfig, device: str | None) -> AndroidRobot:
    serial = device or config.device.serial
    if not serial:
        devices = await AndroidDeviceManager(config.executor).list_devices()
        if not devices:
            raise ActionableError(
                "No devices connected. Connect a device or start an emulator."
            )
        serial = devices[0].device_id
        logging.getLogger("mobilerobot").debug(f"Using first device: {serial}")
    return AndroidRobot(serial, config=config)


@click.group()
@click.option("--config", "-c", help="Path to custom config file", default=None)
@click.option("--device", "-d", help="Device serial number", default=None)
@click.option("--debug", is_flag=True, help="Enable verbose debug logging", default=False)
@click.pass_context
def cli(ctx: click.Context, config: str | None, device: str | None, debug: bool):
    """Control Android devices through adb."""
    robot_config = load_config(config)
    configure_logging(debug or robot_config.logging.debug)
    ctx.obj = {"config": robot_config, "device": device}


@cli.command()
@click.pass_obj
@reports_errors
@coro
async def devices(obj):
    """List connected Android devices."""
    found = await AndroidDeviceManager(obj["config"].executor).list_devices()
    if not found:
        console.print("[yellow]No devices connected.[/]")
        return

    console.print(f"[green]Found {len(found)} connected device(s):[/]")
    for device in found:
        console.print(f"  • [bold]{device.device_id}[/] ({device.device_type.value})")


@cli.command()
@click.pass_obj
@reports_errors
@coro
async def info(obj):
    """Show hardware properties and screen size."""
    robot = await _resolve_robot(obj["config"], obj["device"])
    hardware = await robot.get_device_hardware_info()
    size = await robot.get_screen_size()
    orientation = await robot.get_orientation()

    table = Table(title=robot.device_id)
    table.add_column("Property")
    table.add_column("Value")
    for name, value in hardware.model_dump().items():
        table.add_row(name, value)
    table.add_row("screen", f"{size.width}x{size.height}")
    table.add_row("orientation", orientation.value)
    console.print(table)


@cli.command()
@click.option("--output", "-o", help="Where to write the PNG", default="screenshot.png")
@click.pass_obj
@reports_errors
@coro
async def screenshot(obj, output: str):
    """Save a screenshot of the active display."""
    robot = await _resolve_robot(obj["config"], obj["device"])
    data = await robot.get_screenshot()
    with open(output, "wb") as f:
        f.write(data)
    console.print(f"[green]Saved {len(data)} bytes to {output}[/]")


@cli.command()
@click.pass_obj
@reports_errors
@coro
async def elements(obj):
    """Print on-screen elements as JSON."""
    robot = await _resolve_robot(obj["config"], obj["device"])
    found = await robot.get_elements_on_screen()
    click.echo(json.dumps([element.to_dict() for element in found], indent=2))


@cli.command()
@click.pass_obj
@reports_errors
@coro
async def apps(obj):
    """List launchable apps."""
    robot = await _resolve_robot(obj["config"], obj["device"])
    for app in await robot.list_apps():
        console.print(app.package_name)


@cli.command()
@click.argument("x", type=int)
@click.argument("y", type=int)
@click.option("--double", is_flag=True, help="Tap twice", default=False)
@click.option("--long", "long_press", is_flag=True, help="Long press", default=False)
@click.pass_obj
@reports_errors
@coro
async def tap(obj, x: int, y: int, double: bool, long_press: bool):
    """Tap at X, Y."""
    robot = await _resolve_robot(obj["config"], obj["device"])
    if long_press:
        await robot.long_press(x, y)
    elif double:
        await robot.double_tap(x, y)
    else:
        await robot.tap(x, y)


@cli.command()
@click.argument("direction", type=click.Choice([d.value for d in SwipeDirection]))
@click.option("--x", type=int, help="Start x; swipes the whole screen when omitted", default=None)
@click.option("--y", type=int, help="Start y", default=None)
@click.option("--distance", type=int, help="Distance in pixels", default=None)
@click.pass_obj
@reports_errors
@coro
async def swipe(obj, direction: str, x: int | None, y: int | None, distance: int | None):
    """Swipe in DIRECTION."""
    robot = await _resolve_robot(obj["config"], obj["device"])
    if x is None or y is None:
        await robot.swipe(direction)
    else:
        await robot.swipe_from_coordinate(x, y, direction, distance)


@cli.command(name="type")
@click.argument("text")
@click.pass_obj
@reports_errors
@coro
async def type_text(obj, text: str):
    """Type TEXT into the focused field."""
    robot = await _resolve_robot(obj["config"], obj["device"])
    await robot.send_keys(text)


@cli.command()
@click.argument("button", type=click.Choice([b.value for b in Button]))
@click.pass_obj
@reports_errors
@coro
async def press(obj, button: str):
    """Press a hardware BUTTON."""
    robot = await _resolve_robot(obj["config"], obj["device"])
    await robot.press_button(button)


@cli.command()
@click.argument(
    "value", type=click.Choice([o.value for o in Orientation]), required=False
)
@click.pass_obj
@reports_errors
@coro
async def orientation(obj, value: str | None):
    """Show or set the screen orientation."""
    robot = await _resolve_robot(obj["config"], obj["device"])
    if value:
        await robot.set_orientation(value)
    console.print((await robot.get_orientation()).value)


if __name__ == "__main__":
    cli()
