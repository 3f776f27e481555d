"""Create products table

Revision ID: 4f1c2a9e7b30
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4f1c2a9e7b30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'products',
        sa.Column('id', sa.String(length=20), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('subcategory', sa.String(length=50), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('pictures', sa.JSON(), nullable=True),
        sa.Column('colours', sa.JSON(), nullable=True),
        sa.Column('printing_method', sa.String(length=200), nullable=False),
        sa.Column('sizes', sa.JSON(), nullable=True),
        sa.Column('minimum_quantity', sa.Integer(), nullable=False),
        sa.Column('featured', sa.Boolean(), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=True),
        sa.Column('status', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_products_category', 'products', ['category'])
    op.create_index('ix_products_featured', 'products', ['featured'])
    op.create_index('ix_products_category_subcategory', 'products', ['category', 'subcategory'])


def downgrade() -> None:
    op.drop_index('ix_products_category_subcategory', table_name='products')
    op.drop_index('ix_products_featured', table_name='products')
    op.drop_index('ix_products_category', table_name='products')
    op.drop_table('products')
