from __future__ import annotations

import sys

from alembic.autogenerate import api as ag_api
from alembic.runtime.migration import MigrationContext
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from giftwheel.db.engine import make_engine
from giftwheel.models import Base


def _flatten(ops, depth: int = 0) -> list[str]:
    lines: list[str] = []
    for op in ops:
        lines.append(f"{'  ' * depth}- {op}")
        lines.extend(_flatten(getattr(op, "ops", None) or [], depth + 1))
    return lines


def collect_drift(engine: Engine) -> list[str]:
    """Return one line per difference between the database and the models."""
    with engine.connect() as connection:
        context = MigrationContext.configure(
            connection=connection,
            opts={
                "compare_type": True,
                "compare_server_default": True,
                "render_as_batch": connection.dialect.name == "sqlite",
            },
        )
        upgrade_ops = ag_api.produce_migrations(context, Base.metadata).upgrade_ops
    if upgrade_ops is None or upgrade_ops.is_empty():
        return []
    return _flatten(upgrade_ops.ops or [])


def main() -> int:
    """Exit 0 when the schema matches the models, 1 on drift, 2 on error."""
    engine = make_engine()
    url_display = engine.url.render_as_string(hide_password=True)
    try:
        differences = collect_drift(engine)
    except SQLAlchemyError as exc:
        print(f"Schema drift check: ERROR for {url_display}: {exc}", file=sys.stderr)
        return 2
    finally:
        engine.dispose()

    if not differences:
        print(f"Schema drift check: OK (no differences) for {url_display}.")
        return 0
    print(f"Schema drift check: FAILED for {url_display}. Differences detected:")
    print("\n".join(differences))
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
