"""Annotation CLI commands."""

import argparse
import dataclasses

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import ArgumentError

from schema_annotate.comment.options import RenderOptions
from schema_annotate.config import AnnotateConfig, load_config
from schema_annotate.errors import AnnotateError

_TOGGLES = ("border", "indexes", "foreign_keys", "constraints", "references", "triggers")


def _options(args: argparse.Namespace, config: AnnotateConfig) -> RenderOptions:
    overrides = {
        name: getattr(args, name)
        for name in _TOGGLES + ("position",)
        if getattr(args, name, None) is not None
    }
    return dataclasses.replace(config.options, **overrides)


def _load(args: argparse.Namespace) -> AnnotateConfig | None:
    try:
        config = load_config(args.config)
    except AnnotateError as e:
        print(f"ERROR: {e}")
        return None
    if args.database_url:
        config.database_url = args.database_url
    if not config.database_url:
        print("ERROR: No database URL. Pass --database-url, set database_url in "
              "the config file or SCHEMA_ANNOTATE_DATABASE_URL.")
        return None
    return config


def _engine(config: AnnotateConfig) -> Engine | None:
    try:
        return create_engine(config.database_url)
    except ArgumentError as e:
        print(f"ERROR: Invalid database URL: {e}")
        return None


def cmd_run(args: argparse.Namespace) -> int:
    from schema_annotate.discover import expand_paths
    from schema_annotate.splice.sync import annotate_all

    config = _load(args)
    if config is None:
        return 1
    try:
        options = _options(args, config)
    except AnnotateError as e:
        print(f"ERROR: {e}")
        return 1

    if args.paths:
        paths = expand_paths(args.paths)
    else:
        paths = expand_paths(config.models, base=config.base_dir)
    if not paths:
        print("No model files to annotate.")
        return 0

    engine = _engine(config)
    if engine is None:
        return 1
    try:
        result = annotate_all(
            paths, engine, options,
            tables=config.tables,
            dry_run=args.dry_run,
        )
    finally:
        engine.dispose()

    print("Schema Annotation Results")
    print("─" * 40)
    print(f"  Updated:   {len(result['updated'])}")
    print(f"  Unchanged: {len(result['unchanged'])}")
    print(f"  Skipped:   {len(result['skipped'])}")
    if result["errors"]:
        print(f"  Errors:    {len(result['errors'])}")
        for e in result["errors"]:
            print(f"    - {e['path']}: {e['error']}")

    if result.get("dry_run"):
        print("\n[DRY RUN] No files were modified.")

    return 1 if result["errors"] else 0


def cmd_show(args: argparse.Namespace) -> int:
    from schema_annotate.comment.renderer import render_table_comment
    from schema_annotate.provider.factory import provider_for

    config = _load(args)
    if config is None:
        return 1

    engine = _engine(config)
    if engine is None:
        return 1
    try:
        block = render_table_comment(provider_for(engine), args.table, _options(args, config))
    except (AnnotateError, ValueError) as e:
        print(f"ERROR: {e}")
        return 1
    finally:
        engine.dispose()

    print(block)
    return 0
