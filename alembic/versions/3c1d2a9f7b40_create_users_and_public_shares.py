"""create users and public_shares

Revision ID: 3c1d2a9f7b40
Revises: 
Create Date: 2026-10-18 09:12:41.503187

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3c1d2a9f7b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the user and public share tables."""
    op.create_table(
        'users',
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.PrimaryKeyConstraint('name'),
    )
    op.create_table(
        'public_shares',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('file_path', sa.String(), nullable=False),
        sa.Column(
            'created', sa.DateTime(), server_default=sa.func.now(), nullable=False
        ),
        sa.PrimaryKeyConstraint('id'),
    )


def downgrade() -> None:
    """Drop the user and public share tables."""
    op.drop_table('public_shares')
    op.drop_table('users')
