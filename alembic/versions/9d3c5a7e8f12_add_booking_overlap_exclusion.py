"""add_booking_overlap_exclusion

Revision ID: 9d3c5a7e8f12
Revises: 4b1e6f0c2a91
Create Date: 2026-10-18 11:02:09.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '9d3c5a7e8f12'
down_revision: Union[str, None] = '4b1e6f0c2a91'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Upgrade schema.

    Impide en la base de datos que dos reservas activas del mismo barbero se
    solapen. La violación devuelve SQLSTATE 23P01, que la API traduce a 409.
    Solo aplica en PostgreSQL (requiere btree_gist).
    """
    if op.get_bind().dialect.name != "postgresql":
        return

    op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist;")
    op.execute("""
        ALTER TABLE bookings
        ADD CONSTRAINT bookings_no_overlap_per_provider
        EXCLUDE USING gist (
            provider_id WITH =,
            tsrange(start_at, end_at, '[)') WITH &&
        )
        WHERE (status IN ('PENDING', 'CONFIRMED'));
    """)
    op.execute("""
        ALTER TABLE bookings
        ADD CONSTRAINT ck_bookings_time_range CHECK (start_at < end_at);
    """)


def downgrade() -> None:
    """Downgrade schema."""
    if op.get_bind().dialect.name != "postgresql":
        return

    op.execute("ALTER TABLE bookings DROP CONSTRAINT IF EXISTS ck_bookings_time_range;")
    op.execute(
        "ALTER TABLE bookings DROP CONSTRAINT IF EXISTS bookings_no_overlap_per_provider;"
    )
