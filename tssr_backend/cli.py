import click
import json
import logging
import os
from flask import current_app
from flask.cli import with_appcontext
from tssr_shared.utils import compute_file_hash
from .models import db, UNCONSTRAINED_TABLES
from .services.hierarchy_service import seed_hierarchy
from .utils import get_orphaned_records

logger = logging.getLogger(__name__)

DEFAULT_SEED_FILE = os.path.join(os.path.dirname(__file__), 'data', 'hierarchy_seed.json')

MODELS_BY_TABLE = {model.__tablename__: model for model in UNCONSTRAINED_TABLES}


def image_models():
    return [model for model in UNCONSTRAINED_TABLES if hasattr(model, 'is_active')]


def remove_stored_file(model, image):
    """Unlink an image file once no active row of its table points at it."""
    still_used = model.query.filter(
        model.is_active.is_(True),
        (model.content_hash == image.content_hash) | (model.file_path == image.file_path)
    ).first()
    if still_used is not None:
        return
    path = os.path.join(current_app.config['UPLOAD_FOLDER'], image.file_path)
    try:
        if os.path.exists(path):
            os.remove(path)
    except OSError as e:
        logger.warning(f"Could not delete file {path}: {e}")


@click.command('init-db')
@with_appcontext
def init_db_command():
    """Create all tables that do not exist yet."""
    logger.info("Starting database initialization")
    db.create_all()
    logger.info("Database tables created successfully")
    click.echo('Initialized the database.')


@click.command('seed-hierarchy')
@click.option('--file', 'seed_file', type=click.Path(exists=True, dir_okay=False),
              help='JSON file with {mu, country, ct, project, company} rows')
@with_appcontext
def seed_hierarchy_command(seed_file):
    """Load MU / Country / CT / Project / Company reference data."""
    path = seed_file or DEFAULT_SEED_FILE
    logger.info(f"Seeding hierarchy from {path}")
    with open(path, 'r', encoding='utf-8') as f:
        rows = json.load(f)
    if not isinstance(rows, list):
        raise click.ClickException('Seed file must contain a JSON array of rows')

    try:
        created = seed_hierarchy(rows)
    except KeyError as e:
        db.session.rollback()
        raise click.ClickException(f'Seed row is missing {e}')

    click.echo(f"Processed {len(rows)} rows:")
    for level, count in created.items():
        click.echo(f"  {level}: {count} created")


@click.command('check-referential-integrity')
@click.option('--fix', is_flag=True, help='Delete orphaned form rows and deactivate orphaned images')
@click.option('--table', 'table_name', type=click.Choice(sorted(MODELS_BY_TABLE)),
              help='Check one table only')
@with_appcontext
def check_referential_integrity_command(fix, table_name):
    """Find rows whose session_id no longer matches a survey."""
    orphaned = get_orphaned_records(table_name)
    total_orphaned = sum(len(records) for records in orphaned.values())

    if total_orphaned == 0:
        click.echo("All session references are intact - no orphaned records found")
        return

    click.echo(f"Found {total_orphaned} orphaned records:")
    for table, record_ids in orphaned.items():
        click.echo(f"\n{table.upper()}: {len(record_ids)} orphaned records")
        model = MODELS_BY_TABLE[table]
        for record_id in record_ids[:10]:  # Show first 10
            record = db.session.get(model, record_id)
            click.echo(f"  {table} ID {record_id}: references missing session '{record.session_id}'")
        if len(record_ids) > 10:
            click.echo(f"  ... and {len(record_ids) - 10} more")

    if not fix:
        click.echo("\nUse --fix to clean up these orphaned records")
        return

    click.echo("\nCleaning up orphaned records...")
    deleted_counts = {}
    try:
        for table, record_ids in orphaned.items():
            model = MODELS_BY_TABLE[table]
            records = model.query.filter(model.id.in_(record_ids)).all()
            if hasattr(model, 'is_active'):
                # Image rows are kept as history, their files are released
                active = [record for record in records if record.is_active]
                for record in active:
                    record.is_active = False
                db.session.flush()
                for record in active:
                    remove_stored_file(model, record)
                deleted_counts[table] = len(active)
            else:
                for record in records:
                    db.session.delete(record)
                deleted_counts[table] = len(records)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f"Failed to clean up orphaned records: {e}", exc_info=True)
        raise click.ClickException(f"Error cleaning up orphaned records: {e}")

    logger.info(f"Referential integrity fix completed: {deleted_counts}")
    click.echo(f"Cleaned up {sum(deleted_counts.values())} orphaned records:")
    for table, count in deleted_counts.items():
        if count > 0:
            click.echo(f"  {table}: {count}")


@click.command('check-image-integrity')
@click.option('--fix', is_flag=True, help='Deactivate rows with missing files and refresh stale hashes')
@with_appcontext
def check_image_integrity_command(fix):
    """Check stored hash and size of every active image against its file."""
    logger.info(f"Starting image integrity check (fix={fix})")
    upload_root = current_app.config['UPLOAD_FOLDER']
    issues_found = 0
    fixed = 0

    for model in image_models():
        images = model.query.filter_by(is_active=True).all()
        logger.info(f"Checking integrity for {len(images)} images in {model.__tablename__}")
        for image in images:
            path = os.path.join(upload_root, image.file_path)
            if not os.path.exists(path):
                issues_found += 1
                logger.warning(f"Image file missing: table={model.__tablename__}, id={image.id}")
                click.echo(f"Missing file for {model.__tablename__} image {image.id}: {image.file_path}")
                if fix:
                    image.is_active = False
                    fixed += 1
                    click.echo(f"  Deactivated image {image.id}")
                continue

            current_hash = compute_file_hash(path)
            actual_size = os.path.getsize(path)
            if image.content_hash == current_hash and image.file_size == actual_size:
                continue

            issues_found += 1
            logger.warning(
                f"Image integrity issue: table={model.__tablename__}, id={image.id}, "
                f"hash_match={image.content_hash == current_hash}, size_match={image.file_size == actual_size}"
            )
            click.echo(f"Integrity issue with {model.__tablename__} image {image.id}:")
            if image.content_hash != current_hash:
                click.echo(f"  Hash mismatch: stored={image.content_hash}, computed={current_hash}")
            if image.file_size != actual_size:
                click.echo(f"  Size mismatch: stored={image.file_size}, actual={actual_size}")
            if fix:
                image.content_hash = current_hash
                image.file_size = actual_size
                fixed += 1
                click.echo(f"  Fixed image {image.id}")

    if fix:
        db.session.commit()

    if issues_found == 0:
        logger.info("Image integrity check completed: All images passed")
        click.echo("All images passed integrity check")
    else:
        logger.warning(f"Image integrity check completed: Found {issues_found} issues, fixed {fixed}")
        click.echo(f"Found {issues_found} integrity issues")
        if fix:
            click.echo(f"Fixed {fixed} images")
