#!/usr/bin/env python3
"""
Validate one project from a JSON file and print the validation record.

Usage:
  python -m backend_rwa.tools.validate_project project.json
  python -m backend_rwa.tools.validate_project project.json --offline
  python -m backend_rwa.tools.validate_project project.json --output record.json
  python -m backend_rwa.tools.validate_project --project-id abc123 --save

The JSON file holds the project fields (id, name, description, website, roi,
audit_document_path, audit_url / auditUrl). --project-id reads the project
from the database instead. --offline skips reference services and storage.
Exit code is 0 when the project passes overall, 1 when it fails, 2 on error.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from backend_rwa.analytics import Project, ValidationContext, validate_project
from backend_rwa.config import get_settings
from backend_rwa.core.exceptions import RwaError
from backend_rwa.rwa_logging import get_logger

logger = get_logger(__name__)


def _load_project(path: Path) -> Project:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object")
    return Project.from_dict(data)


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Run scam, sanctions and audit checks for one project")
    ap.add_argument("project_file", nargs="?", type=Path, help="Project JSON file")
    ap.add_argument("--project-id", help="Read the project from the database instead of a file")
    ap.add_argument("--offline", action="store_true", help="Skip reference services and file storage")
    ap.add_argument("--save", action="store_true", help="Upsert the result into the validation store")
    ap.add_argument("--output", type=Path, help="Write the JSON record to this file instead of stdout")
    args = ap.parse_args(argv)

    if not args.project_file and not args.project_id:
        ap.error("a project file or --project-id is required")

    db = None
    try:
        if args.project_id or args.save:
            from backend_rwa.database import get_database

            db = get_database()
        if args.project_id:
            from backend_rwa.database import ProjectReader

            project = ProjectReader(db).get(args.project_id)
        else:
            project = _load_project(args.project_file)
        context = ValidationContext.offline() if args.offline else ValidationContext.from_settings(get_settings())
        validation = validate_project(project, context)
        if args.save:
            from backend_rwa.database import ValidationStore

            ValidationStore(db).upsert(project.id, validation)
    except (OSError, ValueError, RwaError) as e:
        logger.error("validate_project_cli_failed", error=str(e))
        print(f"[validate_project] {e}", file=sys.stderr)
        return 2

    record = json.dumps({"projectId": project.id, **validation.to_dict()}, indent=2)
    if args.output:
        args.output.write_text(record, encoding="utf-8")
    else:
        print(record)
    return 0 if validation.overall_passed else 1


if __name__ == "__main__":
    raise SystemExit(main())
