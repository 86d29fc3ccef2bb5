#!/usr/bin/env python3
"""
GridPlace CLI

Command-line interface for editing layout documents with the grid engine.

Usage:
    gridplace new <layout.json>
    gridplace add <layout.json> chart|kpi [--count N]
    gridplace move <layout.json> <id> <col> <row> [--mode MODE]
    gridplace resize <layout.json> <id> <width> <height> [--col C] [--row R]
    gridplace remove <layout.json> <id>
    gridplace reflow <layout.json>
    gridplace validate <layout.json>
    gridplace report <layout.json> [--viewport PX]
    gridplace render <layout.json> -o out.svg [--viewport PX]

Edits always apply to the desktop (Wide) arrangement stored in the file;
--viewport only changes how report and render present it.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .config import ConfigError, load_engine_config
from .grid.abstraction import ComponentKind
from .grid.layout_file import (
    LayoutDocument,
    LayoutValidationError,
    read_layout_file,
    write_layout_file,
)
from .placement.collision import CollisionMode
from .placement.solver import find_collisions


def load_engine(args, layout_required: bool = True):
    """
    Build an engine from the command line and load the layout file.

    Returns:
        LayoutEngine, or None after printing the error
    """
    from .api.engine import LayoutEngine

    try:
        config = load_engine_config(args.config)
        if getattr(args, 'mode', None):
            config.collision_mode = CollisionMode(args.mode)

        engine = LayoutEngine(config, canvas_width=getattr(args, 'canvas_width', 1200.0))
        path = Path(args.layout)
        if path.exists():
            engine.import_layout(read_layout_file(path))
        elif layout_required:
            print(f"Error: layout file not found: {path}")
            return None
    except (FileNotFoundError, ConfigError, LayoutValidationError) as e:
        print(f"Error: {e}")
        return None

    viewport = getattr(args, 'viewport', None)
    if viewport is not None:
        engine.notify_viewport_resize(viewport)
    return engine


def save_engine(engine, args):
    """Write the engine's (Wide) arrangement back to the layout file."""
    write_layout_file(engine.export_layout(), Path(args.layout))


def format_rect(rect) -> str:
    return f"({rect.col},{rect.row}) {rect.width}x{rect.height}"


def cmd_new(args):
    """Create an empty layout document."""
    path = Path(args.layout)
    if path.exists() and not args.force:
        print(f"Error: {path} already exists (use --force to overwrite)")
        return 1
    write_layout_file(LayoutDocument.from_components([]), path)
    print(f"Created empty layout: {path}")
    return 0


def cmd_add(args):
    """Add components at their first-fit slots."""
    engine = load_engine(args, layout_required=False)
    if engine is None:
        return 1

    for _ in range(args.count):
        component = engine.add_component(ComponentKind(args.kind))
        print(f"Added {component.kind.value} {component.id} at {format_rect(component.rect)}")

    save_engine(engine, args)
    return 0


def cmd_remove(args):
    """Remove a component."""
    engine = load_engine(args)
    if engine is None:
        return 1

    try:
        engine.remove_component(args.id)
    except KeyError:
        print(f"Error: no component with id {args.id}")
        return 1

    print(f"Removed {args.id}")
    save_engine(engine, args)
    return 0


def _print_resolution(result, component_id: str):
    print(f"{component_id} -> {format_rect(result.rect_of(component_id))} "
          f"[{result.mode.value}]")
    if result.relocated:
        print("  overlap on release, relocated to first free slot")
    for other in result.reshaped:
        print(f"  reshaped {other} -> {format_rect(result.rect_of(other))}")
    for other in result.absorbed:
        print(f"  absorbed {other} -> {format_rect(result.rect_of(other))}")


def cmd_move(args):
    """Move a component and resolve collisions."""
    engine = load_engine(args)
    if engine is None:
        return 1

    try:
        result = engine.move_component(args.id, args.col, args.row)
    except KeyError:
        print(f"Error: no component with id {args.id}")
        return 1

    _print_resolution(result, args.id)
    save_engine(engine, args)
    return 0


def cmd_resize(args):
    """Resize a component and resolve collisions."""
    engine = load_engine(args)
    if engine is None:
        return 1

    try:
        result = engine.resize_component(args.id, args.width, args.height,
                                         col=args.col, row=args.row)
    except KeyError:
        print(f"Error: no component with id {args.id}")
        return 1

    _print_resolution(result, args.id)
    save_engine(engine, args)
    return 0


def cmd_reflow(args):
    """Repack all components."""
    engine = load_engine(args)
    if engine is None:
        return 1

    for component in engine.reflow():
        print(f"{component.id:>6} {component.kind.value:<6} {format_rect(component.rect)}")

    save_engine(engine, args)
    return 0


def cmd_validate(args):
    """Validate a layout document: shape, bounds and overlaps."""
    try:
        document = read_layout_file(args.layout)
    except (FileNotFoundError, LayoutValidationError) as e:
        print(f"INVALID: {e}")
        return 1

    components = document.to_components()
    collisions = find_collisions(components)

    print(f"{args.layout}: {len(components)} components, version {document.version}")
    for first, second in collisions:
        print(f"  overlap: {first} / {second}")

    if collisions:
        print(f"INVALID: {len(collisions)} overlapping pair(s)")
        return 1
    print("OK")
    return 0


def cmd_report(args):
    """Print the arrangement at a viewport."""
    engine = load_engine(args)
    if engine is None:
        return 1

    components = engine.components
    rows = max((c.rect.bottom for c in components), default=0)

    print(f"Breakpoint: {engine.current_breakpoint.value}")
    print(f"Collision mode: {engine.collision_mode.value}")
    print(f"Components: {len(components)}  Rows: {rows}")
    print("")
    print(f"{'id':>6} {'type':<6} {'col':>4} {'row':>4} {'w':>3} {'h':>3}")
    for c in components:
        print(f"{c.id:>6} {c.kind.value:<6} {c.rect.col:>4} {c.rect.row:>4} "
              f"{c.rect.width:>3} {c.rect.height:>3}")

    handles = engine.border_handles
    if handles:
        print("")
        print(f"Border handles: {len(handles)}")
        for handle in handles:
            print(f"  {handle.key} line={handle.line} span={handle.span_start}-{handle.span_end}")
    return 0


def cmd_render(args):
    """Render the arrangement to SVG."""
    from .render.svg import render_svg

    engine = load_engine(args)
    if engine is None:
        return 1

    svg = render_svg(engine.components, engine.metrics, handles=engine.border_handles)
    output = Path(args.output)
    output.write_text(svg)
    print(f"Rendered {len(engine.components)} components to {output}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='gridplace',
        description="GridPlace - 12-column grid layout engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  gridplace new dashboard.json
  gridplace add dashboard.json chart --count 2
  gridplace add dashboard.json kpi
  gridplace move dashboard.json 3 0 0 --mode collision_resize
  gridplace report dashboard.json --viewport 800
  gridplace render dashboard.json -o dashboard.svg
        """,
    )
    parser.add_argument('--version', action='version', version='gridplace 0.1.0')

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('layout', help='Layout document (.json, .yaml or .yml)')
    common.add_argument('--config', help='Engine configuration YAML')
    common.add_argument('-v', '--verbose', action='store_true', help='Verbose output')

    modes = [m.value for m in CollisionMode]
    editing = argparse.ArgumentParser(add_help=False)
    editing.add_argument('--mode', choices=modes,
                         help='Collision policy (default: from configuration)')

    viewing = argparse.ArgumentParser(add_help=False)
    viewing.add_argument('--viewport', type=float,
                         help='Viewport width in pixels (default: desktop)')
    viewing.add_argument('--canvas-width', type=float, default=1200.0,
                         help='Canvas width in pixels (default: 1200)')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    new_parser = subparsers.add_parser('new', parents=[common], help='Create an empty layout')
    new_parser.add_argument('--force', action='store_true', help='Overwrite an existing file')

    add_parser = subparsers.add_parser('add', parents=[common], help='Add components')
    add_parser.add_argument('kind', choices=[k.value for k in ComponentKind])
    add_parser.add_argument('--count', type=int, default=1, help='How many to add')

    remove_parser = subparsers.add_parser('remove', parents=[common], help='Remove a component')
    remove_parser.add_argument('id')

    move_parser = subparsers.add_parser('move', parents=[common, editing],
                                        help='Move a component')
    move_parser.add_argument('id')
    move_parser.add_argument('col', type=int)
    move_parser.add_argument('row', type=int)

    resize_parser = subparsers.add_parser('resize', parents=[common, editing],
                                          help='Resize a component')
    resize_parser.add_argument('id')
    resize_parser.add_argument('width', type=int)
    resize_parser.add_argument('height', type=int)
    resize_parser.add_argument('--col', type=int, help='New left column')
    resize_parser.add_argument('--row', type=int, help='New top row')

    subparsers.add_parser('reflow', parents=[common], help='Repack all components')
    subparsers.add_parser('validate', parents=[common], help='Validate a layout document')
    subparsers.add_parser('report', parents=[common, viewing], help='Print the arrangement')

    render_parser = subparsers.add_parser('render', parents=[common, viewing],
                                          help='Render the arrangement to SVG')
    render_parser.add_argument('-o', '--output', required=True, help='Output SVG path')

    return parser


def main(argv: Optional[list] = None):
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    commands = {
        'new': cmd_new,
        'add': cmd_add,
        'remove': cmd_remove,
        'move': cmd_move,
        'resize': cmd_resize,
        'reflow': cmd_reflow,
        'validate': cmd_validate,
        'report': cmd_report,
        'render': cmd_render,
    }

    return commands[args.command](args)


if __name__ == '__main__':
    sys.exit(main())
