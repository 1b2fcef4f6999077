"""Case-fold streaming service names into name_key

Revision ID: d5e6f7a8b9c0
Revises: c4d5e6f7a8b9
Create Date: 2026-10-19 16:30:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "d5e6f7a8b9c0"
down_revision: str | Sequence[str] | None = "c4d5e6f7a8b9"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

services = sa.table(
    "streaming_services",
    sa.column("id", sa.Integer()),
    sa.column("name", sa.String()),
    sa.column("name_key", sa.String()),
)


def upgrade() -> None:
    """Upgrade schema."""
    with op.batch_alter_table("streaming_services", schema=None) as batch_op:
        batch_op.add_column(sa.Column("name_key", sa.String(length=200), nullable=True))

    # lower() in SQLite only folds ASCII, so the keys are computed here
    bind = op.get_bind()
    for service_id, name in bind.execute(sa.select(services.c.id, services.c.name)).all():
        bind.execute(
            services.update()
            .where(services.c.id == service_id)
            .values(name_key=name.casefold())
        )

    op.drop_index("uq_streaming_services_name_lower", table_name="streaming_services")
    with op.batch_alter_table("streaming_services", schema=None) as batch_op:
        batch_op.alter_column("name_key", existing_type=sa.String(length=200), nullable=False)
        batch_op.create_index("uq_streaming_services_name_key", ["name_key"], unique=True)


def downgrade() -> None:
    """Downgrade schema."""
    with op.batch_alter_table("streaming_services", schema=None) as batch_op:
        batch_op.drop_index("uq_streaming_services_name_key")
        batch_op.drop_column("name_key")

    op.create_index(
        "uq_streaming_services_name_lower",
        "streaming_services",
        [sa.text("lower(name)")],
        unique=True,
    )
