"""create_soc_tables

Revision ID: 001
Revises:
Create Date: 2026-10-17 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    if not inspector.has_table('soc_companies'):
        op.create_table('soc_companies',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('soc_code', sa.String(length=50), nullable=False),
            sa.Column('name', sa.String(length=255), nullable=False),
            sa.Column('company_name', sa.String(length=255), nullable=True),
            sa.Column('cnpj', sa.String(length=18), nullable=True),
            sa.Column('address', sa.Text(), nullable=True),
            sa.Column('city', sa.String(length=120), nullable=True),
            sa.Column('state', sa.String(length=2), nullable=True),
            sa.Column('zip_code', sa.String(length=10), nullable=True),
            sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_soc_companies_soc_code'), 'soc_companies', ['soc_code'], unique=True)

    if not inspector.has_table('soc_units'):
        op.create_table('soc_units',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('soc_code', sa.String(length=50), nullable=False),
            sa.Column('soc_company_code', sa.String(length=50), nullable=False),
            sa.Column('name', sa.String(length=255), nullable=False),
            sa.Column('company_name', sa.String(length=255), nullable=True),
            sa.Column('cnpj', sa.String(length=18), nullable=True),
            sa.Column('cpf', sa.String(length=14), nullable=True),
            sa.Column('address', sa.Text(), nullable=True),
            sa.Column('risk_degree', sa.String(length=1), nullable=True),
            sa.Column('company_id', sa.String(length=36), nullable=False),
            sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
            sa.ForeignKeyConstraint(['company_id'], ['soc_companies.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('soc_code', 'soc_company_code', name='uq_soc_units_code_company')
        )
        op.create_index(op.f('ix_soc_units_soc_company_code'), 'soc_units', ['soc_company_code'], unique=False)
        op.create_index('ix_soc_units_company_name', 'soc_units', ['soc_company_code', 'name'], unique=False)

    if not inspector.has_table('soc_sectors'):
        op.create_table('soc_sectors',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('soc_code', sa.String(length=50), nullable=False),
            sa.Column('soc_company_code', sa.String(length=50), nullable=False),
            sa.Column('name', sa.String(length=255), nullable=False),
            sa.Column('unit_id', sa.String(length=36), nullable=False),
            sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
            sa.ForeignKeyConstraint(['unit_id'], ['soc_units.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_soc_sectors_soc_company_code'), 'soc_sectors', ['soc_company_code'], unique=False)
        op.create_index('ix_soc_sectors_code_name_active', 'soc_sectors', ['soc_code', 'name', 'active'], unique=False)
        op.create_index('ix_soc_sectors_company_name', 'soc_sectors', ['soc_company_code', 'name'], unique=False)

    if not inspector.has_table('soc_jobs'):
        op.create_table('soc_jobs',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('soc_code', sa.String(length=50), nullable=False),
            sa.Column('soc_company_code', sa.String(length=50), nullable=False),
            sa.Column('name', sa.String(length=255), nullable=False),
            sa.Column('detailed_description', sa.Text(), nullable=True),
            sa.Column('cbo', sa.String(length=20), nullable=True),
            sa.Column('sector_id', sa.String(length=36), nullable=False),
            sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
            sa.ForeignKeyConstraint(['sector_id'], ['soc_sectors.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_soc_jobs_soc_code'), 'soc_jobs', ['soc_code'], unique=True)
        op.create_index(op.f('ix_soc_jobs_soc_company_code'), 'soc_jobs', ['soc_company_code'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    # Orden inverso por FKs
    for table in ('soc_jobs', 'soc_sectors', 'soc_units', 'soc_companies'):
        if inspector.has_table(table):
            op.drop_table(table)
