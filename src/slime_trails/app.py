"""Command line front end.

    python -m slime_trails --query "cells=1000&res=win2"
    python -m slime_trails --agents 2000 --resolution 800 --reflection axis
    python -m slime_trails --headless --steps 600 --output trails.png --gif trails.gif

Interactive mode opens a resizable pygame window. Hold a mouse button to
pull the agents towards the pointer; ESC or closing the window quits.
"""

import argparse
import logging
import random
import sys
import time
from collections import deque

import pygame

from slime_trails import render
from slime_trails.agent import ReflectionMode
from slime_trails.config import ConfigurationError, field_height, parse_query
from slime_trails.field import SteeringChannel
from slime_trails.simulation import Simulation

logger = logging.getLogger(__name__)

# --- Display ---
DEFAULT_WINDOW = "1280x720"
PIXEL_SCALE = 2
FPS = 60

# --- Headless ---
DEFAULT_STEPS = 600
DEFAULT_DT = 1 / 60
GIF_FRAMES = 100


def parse_window(value):
    try:
        width, height = (int(v) for v in value.lower().split("x"))
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"window size must look like 1280x720, got {value!r}"
        ) from None
    return width, height


def build_parser():
    parser = argparse.ArgumentParser(
        prog="slime_trails", description="Physarum-style trail following agents"
    )
    parser.add_argument(
        "--query",
        type=str,
        default=None,
        help='Startup string, e.g. "cells=1000&res=win2" (overrides --agents/--resolution)',
    )
    parser.add_argument(
        "--agents", type=int, default=1000, help="Number of agents (max 3000)"
    )
    parser.add_argument(
        "--resolution",
        type=str,
        default="win2",
        help="Field width: win, win2 or a pixel count (default: win2)",
    )
    parser.add_argument(
        "--window",
        type=parse_window,
        default=DEFAULT_WINDOW,
        help=f"Window size used to resolve presets (default: {DEFAULT_WINDOW})",
    )
    parser.add_argument(
        "--decay", type=float, default=None, help="Fraction faded per tick"
    )
    parser.add_argument(
        "--steering",
        choices=[c.value for c in SteeringChannel],
        default=SteeringChannel.ALPHA.value,
        help="Channel compared between sensors (default: alpha)",
    )
    parser.add_argument(
        "--reflection",
        choices=[m.value for m in ReflectionMode],
        default=ReflectionMode.LEGACY.value,
        help="Edge bounce rule (default: legacy)",
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Random seed for reproducibility"
    )
    parser.add_argument(
        "--headless", action="store_true", help="Run without a window"
    )
    parser.add_argument(
        "--steps",
        type=int,
        default=DEFAULT_STEPS,
        help=f"Ticks to run in headless mode (default: {DEFAULT_STEPS})",
    )
    parser.add_argument(
        "--dt",
        type=float,
        default=DEFAULT_DT,
        help="Fixed seconds per tick in headless mode",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="slime_trails.png",
        help="Image written at the end of a headless run",
    )
    parser.add_argument(
        "--gif", type=str, default=None, help="Also record the last frames as a GIF"
    )
    parser.add_argument(
        "--scale",
        type=int,
        default=PIXEL_SCALE,
        help=f"Window pixels per field pixel (default: {PIXEL_SCALE})",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def config_from_args(args):
    if args.scale < 1:
        raise ConfigurationError(f"--scale must be >= 1, got {args.scale}")
    query = args.query or f"cells={args.agents}&res={args.resolution}"
    overrides = {
        "steering_channel": SteeringChannel(args.steering),
        "reflection": ReflectionMode(args.reflection),
    }
    if args.decay is not None:
        overrides["decay_rate"] = args.decay
    window_width, window_height = args.window
    return parse_query(query, window_width, window_height, **overrides)


def print_summary(config):
    print(f"{config.agent_count} agents on a {config.width}x{config.height} field")
    print(
        f"  MaxSpeed={config.max_speed:.0f}  "
        f"SensorDist={config.effective_sensor_distance:.1f}  "
        f"Sensors={list(config.sensor_offsets)}  "
        f"Attraction={config.attraction_factor:.2f}  "
        f"Decay={config.decay_rate:.2f}"
    )
    print(
        f"  Steering={config.steering_channel.value}  "
        f"Reflection={config.reflection.value}"
    )
    print()


def run_headless(simulation, args):
    frames = deque(maxlen=GIF_FRAMES) if args.gif else None
    t_start = time.time()

    def progress(sim):
        if frames is not None:
            frames.append(render.field_to_rgb(sim.field))
        step = sim.tick_count
        if step % 50 == 0 or step == 1:
            elapsed = time.time() - t_start
            rate = step / elapsed if elapsed > 0 else 0.0
            print(f"  step {step}/{args.steps}  ({elapsed:.1f}s elapsed, {rate:.1f} steps/s)")

    simulation.run(args.steps, delta_time=args.dt, callback=progress)
    print()
    print(f"Simulation complete: {time.time() - t_start:.1f}s")

    render.render_image(simulation.field).save(args.output)
    print(f"Saved: {args.output} ({simulation.field.width}x{simulation.field.height})")

    if frames:
        render.save_gif(args.gif, frames)
        print(f"Saved: {args.gif} ({len(frames)} frames)")


def window_to_field(pos, screen, field):
    screen_width, screen_height = screen.get_size()
    return (
        pos[0] / screen_width * field.width,
        pos[1] / screen_height * field.height,
    )


def resize_to_window(simulation, window_width, window_height):
    """Follow a new window aspect ratio, keeping the target field width.

    Returns False for the empty sizes reported while a window is minimised.
    """
    if window_width <= 0 or window_height <= 0:
        logger.debug("Ignoring window size %dx%d", window_width, window_height)
        return False
    width = simulation.field.width
    simulation.resize(width, field_height(width, window_width, window_height))
    return True


def run_interactive(simulation, pixel_scale=PIXEL_SCALE):
    field = simulation.field
    pointer = simulation.pointer

    pygame.init()
    screen = pygame.display.set_mode(
        (field.width * pixel_scale, field.height * pixel_scale), pygame.RESIZABLE
    )
    clock = pygame.time.Clock()

    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
            elif event.type == pygame.MOUSEBUTTONDOWN:
                pointer.move_to(*window_to_field(event.pos, screen, field))
                pointer.press()
            elif event.type == pygame.MOUSEBUTTONUP:
                pointer.release()
            elif event.type == pygame.MOUSEMOTION:
                pointer.move_to(*window_to_field(event.pos, screen, field))
            elif event.type == pygame.VIDEORESIZE:
                if resize_to_window(simulation, event.w, event.h):
                    screen = pygame.display.set_mode(event.size, pygame.RESIZABLE)

        start = time.time()
        simulation.tick()
        render.draw(screen, field)
        pygame.display.flip()

        elapsed = (time.time() - start) * 1000
        pygame.display.set_caption(
            f"Slime trails  |  tick={simulation.tick_count}  "
            f"agents={len(simulation.agents)}  "
            f"fps={simulation.clock.fps:.0f}  {elapsed:.0f}ms"
        )

        clock.tick(FPS)

    pygame.quit()


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = config_from_args(args)
    except ConfigurationError as err:
        print(f"Invalid configuration: {err}")
        return 1

    print_summary(config)
    simulation = Simulation(config, rng=random.Random(args.seed))

    if args.headless:
        run_headless(simulation, args)
    else:
        run_interactive(simulation, args.scale)
    return 0


if __name__ == "__main__":
    sys.exit(main())
