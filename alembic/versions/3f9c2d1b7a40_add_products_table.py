"""Add products table

Revision ID: 3f9c2d1b7a40
Revises:
Create Date: 2025-10-02 09:14:21.518302

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f9c2d1b7a40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table('products',
        sa.Column('barcode', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('brand', sa.String(length=255), nullable=False),
        sa.Column('image_url', sa.Text(), nullable=False),
        sa.Column('category', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('ingredients', sa.Text(), nullable=False),
        sa.Column('countries', sa.Text(), nullable=False),
        sa.Column('manufacturing_places', sa.Text(), nullable=False),
        sa.Column('origins', sa.Text(), nullable=False),
        sa.Column('is_canadian', sa.Boolean(), nullable=False),
        sa.Column('web_origin_signal', sa.Boolean(), nullable=False),
        sa.Column('canadian_factors', sa.JSON(), nullable=True),
        sa.Column('data_source', sa.String(length=50), nullable=False),
        sa.Column('confidence', sa.Float(), nullable=True),
        sa.Column('citations', sa.JSON(), nullable=True),
        sa.Column('fetched_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('barcode')
    )
    op.create_index(op.f('ix_products_barcode'), 'products', ['barcode'], unique=False)
    op.create_index(op.f('ix_products_name'), 'products', ['name'], unique=False)
    op.create_index(op.f('ix_products_brand'), 'products', ['brand'], unique=False)
    op.create_index(op.f('ix_products_is_canadian'), 'products', ['is_canadian'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_products_is_canadian'), table_name='products')
    op.drop_index(op.f('ix_products_brand'), table_name='products')
    op.drop_index(op.f('ix_products_name'), table_name='products')
    op.drop_index(op.f('ix_products_barcode'), table_name='products')
    op.drop_table('products')
