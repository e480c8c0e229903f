import importlib.util
from pathlib import Path

from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import create_engine, inspect

from cirrus.database import Base
import cirrus.models  # noqa: F401

VERSIONS = Path(__file__).resolve().parents[1] / "alembic" / "versions"


def load_revision():
    path = next(VERSIONS.glob("*_create_users_and_public_shares.py"))
    spec = importlib.util.spec_from_file_location("create_users_revision", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def run(engine, step):
    with engine.begin() as conn:
        with Operations.context(MigrationContext.configure(conn)):
            step()


def test_migration_matches_models(tmp_path):
    revision = load_revision()
    engine = create_engine(f"sqlite:///{tmp_path / 'migrated.db'}", future=True)

    run(engine, revision.upgrade)
    inspector = inspect(engine)
    assert set(inspector.get_table_names()) == set(Base.metadata.tables)
    for table in Base.metadata.sorted_tables:
        columns = {column["name"] for column in inspector.get_columns(table.name)}
        assert columns == set(table.columns.keys())
        pk = inspector.get_pk_constraint(table.name)["constrained_columns"]
        assert pk == [column.name for column in table.primary_key]

    run(engine, revision.downgrade)
    assert inspect(engine).get_table_names() == []
    engine.dispose()
