"""create wallet table for the persisted balance

Revision ID: 5c2e9a7b1d04
Revises:
Create Date: 2026-10-19 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2e9a7b1d04'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    if 'wallet' in insp.get_table_names():
        return
    op.create_table(
        'wallet',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('key', sa.String(length=64), nullable=False),
        sa.Column('value', sa.Text(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('wallet') as batch_op:
        batch_op.create_index(batch_op.f('ix_wallet_key'), ['key'], unique=True)


def downgrade():
    with op.batch_alter_table('wallet') as batch_op:
        batch_op.drop_index(batch_op.f('ix_wallet_key'))
    op.drop_table('wallet')
