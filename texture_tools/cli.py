"""Command-line interface for TextureTools batch operations."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Iterable, List, Tuple

from .colors import ColorError
from .config import EditorConfig, load_config, parse_dimension
from .debug_log import setup_debug_logging
from .errors import TextureError
from .grid import Grid, Selection, resize_grid, scale_grid
from .image_io import encode_indexed, load_grid, save_grid
from .interchange import export_layer_text, import_layer_text
from .palette import generate_palette, write_act
from .transforms import flip_horizontal, flip_vertical, rotate_90, rotate_by_angle

_IMAGE_EXTENSIONS = {".png", ".bmp", ".gif", ".tga", ".webp"}
TRANSFORM_OPS = ("flip-h", "flip-v", "rot90", "rotate")


def _parse_size(value: str) -> Tuple[int, int]:
    text = value.lower().strip()
    if "x" in text:
        raw_w, raw_h = text.split("x", 1)
    else:
        raw_w = raw_h = text
    try:
        width, height = int(raw_w), int(raw_h)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Expected WIDTHxHEIGHT, got {value!r}") from exc
    if width < 1 or height < 1:
        raise argparse.ArgumentTypeError(f"Size must be positive, got {value!r}")
    return width, height


def _parse_selection(value: str) -> Selection:
    try:
        x, y, w, h = (int(part) for part in value.split(","))
        return Selection(x=x, y=y, w=w, h=h)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Expected x,y,w,h with w,h >= 1, got {value!r}") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="texture-tools", description="Layered texture utilities")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON settings file (defaults to TEXTURETOOLS_* environment variables)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    export = sub.add_parser("layer-export", help="Write an image as sparse x,y;#color text")
    export.add_argument("image", type=Path, help="Input image")
    export.add_argument("--out", type=Path, default=None, help="Text file (defaults to stdout)")

    imp = sub.add_parser("layer-import", help="Render sparse layer text into a PNG")
    imp.add_argument("text", type=Path, help="Layer text file")
    imp.add_argument("--size", type=_parse_size, default=None, help="Canvas size WxH (defaults to the configured size)")
    imp.add_argument("--out", type=Path, required=True, help="Destination image")

    palette = sub.add_parser("palette", help="List the distinct colors of an image")
    palette.add_argument("image", type=Path, help="Input image")
    palette.add_argument("--act", type=Path, default=None, help="Also write an ACT palette")
    palette.add_argument("--indexed", type=Path, default=None, help="Also write an indexed PNG")

    transform = sub.add_parser("transform", help="Flip or rotate images")
    transform.add_argument("inputs", nargs="+", type=Path, help="Input files or folders")
    transform.add_argument("--op", choices=TRANSFORM_OPS, required=True, help="Transform to apply")
    transform.add_argument("--angle", type=float, default=0.0, help="Degrees for --op rotate")
    transform.add_argument("--select", type=_parse_selection, default=None, help="Region x,y,w,h")
    transform.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Destination folder (defaults to <input>/out)",
    )

    resize = sub.add_parser("resize", help="Crop/pad or rescale an image canvas")
    resize.add_argument("image", type=Path, help="Input image")
    resize.add_argument("--size", type=_parse_size, required=True, help="New size WxH")
    resize.add_argument("--scale", action="store_true", help="Nearest-neighbour scale instead of crop/pad")
    resize.add_argument("--out", type=Path, required=True, help="Destination image")
    return parser


def _expand_inputs(inputs: Iterable[Path]) -> List[Path]:
    files: List[Path] = []
    for path in inputs:
        if path.is_file():
            files.append(path)
        elif path.is_dir():
            files.extend(
                sorted(p for p in path.iterdir() if p.is_file() and p.suffix.lower() in _IMAGE_EXTENSIONS)
            )
        else:
            raise FileNotFoundError(path)
    return files


def _apply_transform(grid: Grid, args: argparse.Namespace) -> Grid:
    if args.op == "flip-h":
        return flip_horizontal(grid, args.select)
    if args.op == "flip-v":
        return flip_vertical(grid, args.select)
    if args.op == "rot90":
        return rotate_90(grid, args.select)
    return rotate_by_angle(grid, args.select, args.angle)


def _canvas_size(size: Tuple[int, int] | None, config: EditorConfig) -> Tuple[int, int]:
    if size is None:
        return config.width, config.height
    width, height = size
    maximum = config.max_canvas_size
    return parse_dimension(width, config.width, maximum), parse_dimension(height, config.height, maximum)


def _load_config(path: Path | None) -> EditorConfig:
    if path is None:
        return EditorConfig.from_env()
    config, warnings = load_config(path)
    for warning in warnings:
        print(f"[WARN] {warning}")
    return config


def _run_layer_export(args: argparse.Namespace, config: EditorConfig) -> int:
    text = export_layer_text(load_grid(args.image))
    if args.out is None:
        print(text)
    else:
        args.out.write_text(text, encoding="utf-8")
        print(f"[OK] {args.image.name} -> {args.out}")
    return 0


def _run_layer_import(args: argparse.Namespace, config: EditorConfig) -> int:
    width, height = _canvas_size(args.size, config)
    grid = import_layer_text(args.text.read_text(encoding="utf-8"), width, height)
    save_grid(args.out, grid)
    print(f"[OK] {args.text.name} -> {args.out} ({grid.non_empty_count()} pixel(s))")
    return 0


def _run_palette(args: argparse.Namespace, config: EditorConfig) -> int:
    grid = load_grid(args.image)
    palette = generate_palette(grid)
    for entry in palette.entries:
        print(f"{entry.id}\t{entry.hex}")
    if args.act is not None:
        write_act(args.act, palette)
        print(f"[OK] palette -> {args.act}")
    if args.indexed is not None:
        args.indexed.write_bytes(encode_indexed(grid, palette))
        print(f"[OK] indexed -> {args.indexed}")
    return 0


def _run_transform(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    try:
        input_files = _expand_inputs(args.inputs)
    except FileNotFoundError as exc:
        parser.error(f"Input path not found: {exc}")
    if not input_files:
        parser.error("No image files found")

    successes = 0
    failures = 0
    for file_path in input_files:
        out_dir = args.out or (file_path.parent / "out")
        try:
            result = _apply_transform(load_grid(file_path), args)
            output_path = out_dir / (file_path.stem + ".png")
            save_grid(output_path, result)
        except (TextureError, OSError) as exc:
            failures += 1
            print(f"[FAIL] {file_path}: {exc}")
            continue
        successes += 1
        print(f"[OK] {file_path.name} -> {output_path}")

    print(f"Completed {successes} file(s), {failures} failure(s).")
    return 0 if failures == 0 else 1


def _run_resize(args: argparse.Namespace, config: EditorConfig) -> int:
    width, height = _canvas_size(args.size, config)
    grid = load_grid(args.image)
    result = scale_grid(grid, width, height) if args.scale else resize_grid(grid, width, height)
    save_grid(args.out, result)
    print(f"[OK] {args.image.name} {grid.width}x{grid.height} -> {width}x{height} {args.out}")
    return 0


def main(argv: list[str] | None = None) -> int:
    setup_debug_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    config = _load_config(args.config)

    if args.command == "transform":
        return _run_transform(args, parser)
    handlers = {
        "layer-export": _run_layer_export,
        "layer-import": _run_layer_import,
        "palette": _run_palette,
        "resize": _run_resize,
    }
    try:
        return handlers[args.command](args, config)
    except (TextureError, ColorError, OSError) as exc:
        print(f"[FAIL] {exc}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
