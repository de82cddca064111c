"""Create spots and reviews tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates `spots` and `reviews`.
How:   UUID keys generated by gen_random_uuid() (PostgreSQL 13+),
       TIMESTAMP WITH TIME ZONE defaults, rating CHECK 1-5, and a
       cascading foreign key so deleting a spot removes its reviews.

Rollback: downgrade() drops both tables (all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "spots",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("name", sa.String(200), nullable=False, comment="Trimmed, never blank"),
        sa.Column("description", sa.Text(), nullable=True, comment="Null when left blank"),
        sa.Column("lat", sa.Double(), nullable=False),
        sa.Column("lng", sa.Double(), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    # Map list: ORDER BY created_at DESC LIMIT 500
    op.create_index("idx_spots_created_at", "spots", [sa.text("created_at DESC")])

    op.create_table(
        "reviews",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("spot_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column(
            "comment",
            sa.Text(),
            nullable=True,
            comment="Reserved; not written by the API",
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["spot_id"], ["spots.id"], ondelete="CASCADE"),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating_range"),
    )
    # Detail view: WHERE spot_id = ? ORDER BY created_at DESC
    op.create_index(
        "idx_reviews_spot_created_at",
        "reviews",
        ["spot_id", sa.text("created_at DESC")],
    )


def downgrade() -> None:
    op.drop_index("idx_reviews_spot_created_at", table_name="reviews")
    op.drop_table("reviews")
    op.drop_index("idx_spots_created_at", table_name="spots")
    op.drop_table("spots")
