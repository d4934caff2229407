"""create ledger tables

Revision ID: 8c41d2e7a9b3
Revises:
Create Date: 2026-10-19 10:12:41.530117

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8c41d2e7a9b3'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'participants',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_table(
        'expenses',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('title', sa.String(500), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('payer_id', sa.String(), sa.ForeignKey('participants.id', ondelete='CASCADE'), nullable=False),
        sa.Column('note', sa.Text(), nullable=False, server_default=''),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_table(
        'expense_debtors',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('expense_id', sa.String(), sa.ForeignKey('expenses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('participant_id', sa.String(), sa.ForeignKey('participants.id', ondelete='CASCADE'), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.UniqueConstraint('expense_id', 'participant_id'),
    )
    op.create_table(
        'obligations',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('expense_id', sa.String(), sa.ForeignKey('expenses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('debtor_id', sa.String(), sa.ForeignKey('participants.id', ondelete='CASCADE'), nullable=False),
        sa.Column('creditor_id', sa.String(), sa.ForeignKey('participants.id', ondelete='CASCADE'), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('kind', sa.String(32), nullable=False, server_default='ordinary'),
        sa.Column('origin_obligation_id', sa.String(), sa.ForeignKey('obligations.id', ondelete='SET NULL'), nullable=True),
        sa.Column('note', sa.Text(), nullable=False, server_default=''),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('amount > 0', name='ck_obligations_amount_positive'),
    )
    op.create_table(
        'payments',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('obligation_id', sa.String(), sa.ForeignKey('obligations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('from_id', sa.String(), sa.ForeignKey('participants.id', ondelete='CASCADE'), nullable=False),
        sa.Column('to_id', sa.String(), sa.ForeignKey('participants.id', ondelete='CASCADE'), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('note', sa.Text(), nullable=False, server_default=''),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_obligations_expense_id', 'obligations', ['expense_id'])
    op.create_index('ix_payments_obligation_id', 'payments', ['obligation_id'])


def downgrade() -> None:
    op.drop_index('ix_payments_obligation_id', 'payments')
    op.drop_index('ix_obligations_expense_id', 'obligations')
    op.drop_table('payments')
    op.drop_table('obligations')
    op.drop_table('expense_debtors')
    op.drop_table('expenses')
    op.drop_table('participants')
