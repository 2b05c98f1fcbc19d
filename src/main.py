"""
Command-line front end for relationship graphs.

1) Import a GEDCOM file into a JSON project file (with a computed layout).
2) Export a JSON project file back to GEDCOM.
3) Print the automatic layout of a GEDCOM or project file.
4) Validate the graph for dangling references, cycles and impossible dates.
5) Export the graph as Graphviz DOT source.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from gedcom_codec import read_gedcom_file, write_gedcom_file
from layout import compute_layout
from models import ORIENTATIONS, PROJECT_TYPES, Person, Relationship
from plotting import write_dot
from project_io import (
    ProjectValidationError,
    export_project,
    new_project_meta,
    read_project_file,
    write_project_file,
)
from validation import validate_graph


logger = logging.getLogger(__name__)


# ============================================================================
# Loading
# ============================================================================


def load_graph(path: Path) -> tuple[list[Person], list[Relationship], str, str]:
    """
    Load persons and relationships from a .ged or .json file.

    Returns (persons, relationships, orientation, project_type); GEDCOM files
    carry no layout settings, so they default to a vertical family tree.
    """
    logger.debug("Loading graph from %s", path)
    if path.suffix.lower() == ".json":
        project = read_project_file(path)
        persons, relationships = project.to_domain()
        return persons, relationships, project.layout.orientation, project.meta.project_type

    persons, relationships = read_gedcom_file(path)
    return persons, relationships, "vertical", "familyTree"


# ============================================================================
# Commands
# ============================================================================


def cmd_layout(args: argparse.Namespace) -> int:
    persons, relationships, orientation, project_type = load_graph(args.file)
    result = compute_layout(
        persons,
        relationships,
        args.orientation or orientation,
        args.project_type or project_type,
    )
    print(json.dumps(result.to_dict(), indent=2))
    return 0


def cmd_import_gedcom(args: argparse.Namespace) -> int:
    print(f"Parsing GEDCOM file: {args.gedcom}")
    persons, relationships = read_gedcom_file(args.gedcom)
    print(f"  Found {len(persons)} persons and {len(relationships)} relationships")

    result = compute_layout(persons, relationships, args.orientation, "familyTree")
    project = export_project(
        persons,
        relationships,
        meta=new_project_meta(args.name or args.gedcom.stem),
        layout={
            "orientation": args.orientation,
            "rootPersonId": persons[0].id if persons else None,
            "nodePositions": result.to_dict(),
        },
        settings={"theme": "system", "locale": args.locale},
    )

    write_project_file(args.output, project)
    print(f"Project saved to {args.output}")
    return 0


def cmd_export_gedcom(args: argparse.Namespace) -> int:
    project = read_project_file(args.project)
    persons, relationships = project.to_domain()
    write_gedcom_file(args.output, persons, relationships)
    print(f"GEDCOM saved to {args.output}")
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    persons, relationships, _, _ = load_graph(args.file)
    warnings = validate_graph(persons, relationships)
    if warnings:
        print(f"Found {len(warnings)} validation warnings:")
        for w in warnings:
            print(f"  - {w}")
    else:
        print("No validation issues found")
    return 0


def cmd_dot(args: argparse.Namespace) -> int:
    persons, relationships, orientation, project_type = load_graph(args.file)
    write_dot(args.output, persons, relationships, orientation, project_type)
    print(f"Graph saved to {args.output}")
    return 0


# ============================================================================
# Main
# ============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Family tree and friend cluster graph tools")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("layout", help="print computed node positions as JSON")
    p.add_argument("file", type=Path, help=".ged or .json project file")
    p.add_argument("--orientation", choices=ORIENTATIONS)
    p.add_argument("--project-type", choices=PROJECT_TYPES)
    p.set_defaults(func=cmd_layout)

    p = sub.add_parser("import-gedcom", help="convert a GEDCOM file into a project file")
    p.add_argument("gedcom", type=Path)
    p.add_argument("output", type=Path)
    p.add_argument("--name", help="project name (defaults to the GEDCOM file name)")
    p.add_argument("--orientation", choices=ORIENTATIONS, default="vertical")
    p.add_argument("--locale", choices=("it", "en"), default="it")
    p.set_defaults(func=cmd_import_gedcom)

    p = sub.add_parser("export-gedcom", help="convert a project file into GEDCOM")
    p.add_argument("project", type=Path)
    p.add_argument("output", type=Path)
    p.set_defaults(func=cmd_export_gedcom)

    p = sub.add_parser("validate", help="report suspicious relationships and dates")
    p.add_argument("file", type=Path)
    p.set_defaults(func=cmd_validate)

    p = sub.add_parser("dot", help="write Graphviz DOT source")
    p.add_argument("file", type=Path)
    p.add_argument("output", type=Path)
    p.set_defaults(func=cmd_dot)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    try:
        return args.func(args)
    except (ProjectValidationError, json.JSONDecodeError) as e:
        print(e, file=sys.stderr)
        return 2
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
