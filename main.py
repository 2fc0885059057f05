"""
Floor Plan Recognition - Main Entry Point
"""
import argparse
import asyncio
import json
import logging
import sys

import uvicorn

from config.settings import settings


def setup_logging():
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        filename=str(settings.log_file) if settings.log_file else None,
    )


def run_server(host: str = "0.0.0.0", port: int = 7001, reload: bool = False):
    """Run the API server"""
    print("\n" + "="*70)
    print("  Floor Plan Recognition Server")
    print("="*70)
    print(f"  Host: {host}")
    print(f"  Port: {port}")
    print(f"  API Docs: http://{host}:{port}/docs")
    print(f"  Auto-reload: {'enabled' if reload else 'disabled'}")
    print("="*70 + "\n")

    uvicorn.run(
        "floorplan.api.server:app",
        host=host,
        port=port,
        reload=reload,
    )


def run_cli(input_path: str, output_dir: str = None, as_json: bool = False, formats: str = "txt,json", **kwargs):
    """Run recognition from command line"""
    from floorplan.pipeline import run_recognition

    result = asyncio.run(run_recognition(input_path, **kwargs))

    if not result.success:
        print(f"Failed: {result.error}")
        sys.exit(1)

    if output_dir:
        from floorplan.export import PlanExporter

        exporter = PlanExporter(output_dir=output_dir)
        export_formats = [f.strip() for f in formats.split(",")]
        for path in exporter.export_multi(result, "plan", export_formats):
            print(f"  - {path}")
    elif as_json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        stats = result.stats
        print(f"Lines: {stats.lines_found}  Walls: {stats.walls_found}  Rooms: {stats.rooms_found}")
        print(f"Area: {result.area or '-'}  Ceiling: {result.ceiling_height or '-'}  Address: {result.address or '-'}")
        print("\nWalls:\n" + result.walls)
        print("\nRooms:\n" + result.rooms)


def main():
    parser = argparse.ArgumentParser(
        description="Floor Plan Recognition - Extract metric walls and rooms from floor plans"
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Server command
    server_parser = subparsers.add_parser("server", help="Run API server")
    server_parser.add_argument("--host", default=settings.api_host, help="Host to bind to")
    server_parser.add_argument("--port", type=int, default=settings.api_port, help="Port to listen on")
    server_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")

    # Recognize command
    recognize_parser = subparsers.add_parser("recognize", help="Recognize a floor plan")
    recognize_parser.add_argument("input", help="Input file (PDF, PNG, JPG)")
    recognize_parser.add_argument("-o", "--output", help="Write exports to this directory")
    recognize_parser.add_argument(
        "-f", "--formats",
        default="txt,json",
        help="Export formats with --output (comma-separated: txt,json,scene.json,project.json)"
    )
    recognize_parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    recognize_parser.add_argument("--scale", type=float, help="Known meters per pixel")
    recognize_parser.add_argument("--merge-mode", choices=["single_pass", "fixed_point"], help="Wall merge strategy")

    args = parser.parse_args()
    setup_logging()

    if args.command == "server":
        run_server(host=args.host, port=args.port, reload=args.reload)
    elif args.command == "recognize":
        kwargs = {}
        if args.scale:
            kwargs["scale"] = args.scale
        if args.merge_mode:
            kwargs["merge_mode"] = args.merge_mode

        run_cli(args.input, args.output, args.json, args.formats, **kwargs)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
