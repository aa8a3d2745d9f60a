"""initial_schema

Revision ID: 3c1f0a9d2e47
Revises:
Create Date: 2026-10-19 09:12:44.518302+00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3c1f0a9d2e47'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # 1. budget_requests (root aggregate)
    op.create_table('budget_requests',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('department_name', sa.Text(), nullable=False),
    sa.Column('department_code', sa.String(length=50), nullable=True),
    sa.Column('contact_person', sa.Text(), nullable=False),
    sa.Column('contact_email', sa.Text(), nullable=False),
    sa.Column('contact_phone', sa.String(length=20), nullable=True),
    sa.Column('fiscal_year', sa.Integer(), nullable=False),
    sa.Column('request_title', sa.Text(), nullable=False),
    sa.Column('request_description', sa.Text(), nullable=False),
    sa.Column('total_amount', sa.Numeric(precision=15, scale=2), nullable=False),
    sa.Column('priority_level', sa.String(length=20), nullable=False),
    sa.Column('justification', sa.Text(), nullable=False),
    sa.Column('expected_outcomes', sa.Text(), nullable=False),
    sa.Column('timeline_start', sa.DateTime(), nullable=True),
    sa.Column('timeline_end', sa.DateTime(), nullable=True),
    sa.Column('status', sa.String(length=30), nullable=False),
    sa.Column('submitted_at', sa.DateTime(), nullable=True),
    sa.Column('reviewed_at', sa.DateTime(), nullable=True),
    sa.Column('reviewer_notes', sa.Text(), nullable=True),
    sa.Column('created_at', sa.DateTime(), nullable=False),
    sa.Column('updated_at', sa.DateTime(), nullable=False),
    sa.CheckConstraint(
        "status IN ('draft', 'submitted', 'under_review', 'approved', 'rejected', 'revision_requested')",
        name='chk_budget_request_status',
    ),
    sa.CheckConstraint(
        "priority_level IN ('critical', 'high', 'medium', 'low')",
        name='chk_budget_request_priority',
    ),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_budget_requests_status', 'budget_requests', ['status'], unique=False)
    op.create_index('idx_budget_requests_created', 'budget_requests', ['created_at'], unique=False)
    op.create_index('idx_budget_requests_dept_year', 'budget_requests', ['department_name', 'fiscal_year'], unique=False)

    # 2. budget_items (cascade with parent request)
    op.create_table('budget_items',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('budget_request_id', sa.Integer(), nullable=False),
    sa.Column('category', sa.String(length=30), nullable=False),
    sa.Column('description', sa.Text(), nullable=False),
    sa.Column('unit', sa.Text(), nullable=True),
    sa.Column('quantity', sa.Integer(), nullable=True),
    sa.Column('unit_cost', sa.Numeric(precision=15, scale=2), nullable=False),
    sa.Column('total_cost', sa.Numeric(precision=15, scale=2), nullable=False),
    sa.Column('justification', sa.Text(), nullable=True),
    sa.Column('created_at', sa.DateTime(), nullable=False),
    sa.CheckConstraint(
        "category IN ('personnel', 'goods_services', 'capital_expenditure', 'operational', "
        "'maintenance', 'training', 'travel', 'other')",
        name='chk_budget_item_category',
    ),
    sa.CheckConstraint('quantity IS NULL OR quantity > 0', name='chk_budget_item_qty'),
    sa.ForeignKeyConstraint(['budget_request_id'], ['budget_requests.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_budget_items_request', 'budget_items', ['budget_request_id'], unique=False)

    # 3. file_uploads (cascade with parent request)
    op.create_table('file_uploads',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('budget_request_id', sa.Integer(), nullable=False),
    sa.Column('filename', sa.Text(), nullable=False),
    sa.Column('original_filename', sa.Text(), nullable=False),
    sa.Column('file_path', sa.Text(), nullable=False),
    sa.Column('file_size', sa.Integer(), nullable=False),
    sa.Column('mime_type', sa.Text(), nullable=False),
    sa.Column('uploaded_at', sa.DateTime(), nullable=False),
    sa.CheckConstraint('file_size > 0', name='chk_file_upload_size'),
    sa.ForeignKeyConstraint(['budget_request_id'], ['budget_requests.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_file_uploads_request', 'file_uploads', ['budget_request_id'], unique=False)


def downgrade() -> None:
    op.drop_index('idx_file_uploads_request', table_name='file_uploads')
    op.drop_table('file_uploads')
    op.drop_index('idx_budget_items_request', table_name='budget_items')
    op.drop_table('budget_items')
    op.drop_index('idx_budget_requests_dept_year', table_name='budget_requests')
    op.drop_index('idx_budget_requests_created', table_name='budget_requests')
    op.drop_index('idx_budget_requests_status', table_name='budget_requests')
    op.drop_table('budget_requests')
