"""Create category and category translation tables.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create category tree tables."""
    # Categories, stored as nested sets
    op.create_table(
        'pim_catalog_category',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('code', sa.String(100), nullable=False),
        sa.Column('parent_id', sa.Integer(),
                  sa.ForeignKey('pim_catalog_category.id', ondelete='CASCADE'),
                  nullable=True, index=True),
        sa.Column('root', sa.Integer(), nullable=False, server_default='0', index=True),
        sa.Column('lvl', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('lft', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('rgt', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )

    op.create_unique_constraint(
        'uq_pim_catalog_category_code',
        'pim_catalog_category',
        ['code'],
    )

    # Category labels, one per locale
    op.create_table(
        'pim_catalog_category_translation',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('foreign_key', sa.Integer(),
                  sa.ForeignKey('pim_catalog_category.id', ondelete='CASCADE'),
                  nullable=False, index=True),
        sa.Column('label', sa.String(100), nullable=True),
        sa.Column('locale', sa.String(20), nullable=False),
    )

    op.create_unique_constraint(
        'uq_pim_catalog_category_translation_foreign_key',
        'pim_catalog_category_translation',
        ['foreign_key', 'locale'],
    )


def downgrade() -> None:
    """Drop category tree tables."""
    op.drop_table('pim_catalog_category_translation')
    op.drop_table('pim_catalog_category')
