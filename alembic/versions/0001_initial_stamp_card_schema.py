"""Create stamp card schema

Revision ID: 0001_initial_stamp_card_schema
Revises:
Create Date: 2024-05-01 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial_stamp_card_schema'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def upgrade():
    op.create_table(
        'brands',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('category', sa.String(length=100), nullable=True),
        sa.Column('stamps_required', sa.Integer(), nullable=False),
        sa.Column('reward_name', sa.String(length=255), nullable=False),
        sa.Column('loyalty_settings', sa.JSON(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('stamps_required >= 1', name='ck_brands_stamps_required_positive'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_brands_name'), 'brands', ['name'])
    op.create_index(op.f('ix_brands_created_at'), 'brands', ['created_at'])

    op.create_table(
        'customers',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_customers_email'), 'customers', ['email'], unique=True)
    op.create_index(op.f('ix_customers_created_at'), 'customers', ['created_at'])

    op.create_table(
        'branches',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('brand_id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('address', sa.String(length=500), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('open_now', sa.Boolean(), nullable=False),
        sa.Column('working_hours', sa.JSON(), nullable=True),
        sa.Column('notification_settings', sa.JSON(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['brand_id'], ['brands.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_branches_brand_id'), 'branches', ['brand_id'])
    op.create_index(op.f('ix_branches_created_at'), 'branches', ['created_at'])

    op.create_table(
        'business_users',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('brand_id', sa.String(length=36), nullable=False),
        sa.Column('branch_id', sa.String(length=36), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_by', sa.String(length=36), nullable=True),
        sa.Column('last_login_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "(role = 'OWNER' AND branch_id IS NULL) OR "
            "(role <> 'OWNER' AND branch_id IS NOT NULL)",
            name='ck_business_users_role_branch_scope',
        ),
        sa.ForeignKeyConstraint(['brand_id'], ['brands.id']),
        sa.ForeignKeyConstraint(['branch_id'], ['branches.id']),
        sa.ForeignKeyConstraint(['created_by'], ['business_users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_business_users_email'), 'business_users', ['email'], unique=True)
    op.create_index(op.f('ix_business_users_brand_id'), 'business_users', ['brand_id'])
    op.create_index(op.f('ix_business_users_branch_id'), 'business_users', ['branch_id'])
    op.create_index(op.f('ix_business_users_created_by'), 'business_users', ['created_by'])
    op.create_index(op.f('ix_business_users_created_at'), 'business_users', ['created_at'])

    op.create_table(
        'memberships',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('brand_id', sa.String(length=36), nullable=False),
        sa.Column('stamps', sa.Integer(), nullable=False),
        sa.Column('joined_at', sa.DateTime(), nullable=False),
        sa.Column('last_stamp_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('stamps >= 0', name='ck_memberships_stamps_non_negative'),
        sa.ForeignKeyConstraint(['user_id'], ['customers.id']),
        sa.ForeignKeyConstraint(['brand_id'], ['brands.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'brand_id', name='uq_memberships_user_brand'),
    )
    op.create_index(op.f('ix_memberships_user_id'), 'memberships', ['user_id'])
    op.create_index(op.f('ix_memberships_brand_id'), 'memberships', ['brand_id'])

    op.create_table(
        'activities',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('brand_id', sa.String(length=36), nullable=False),
        sa.Column('branch_id', sa.String(length=36), nullable=False),
        sa.Column('staff_id', sa.String(length=36), nullable=True),
        sa.Column('type', sa.String(length=10), nullable=False),
        sa.Column('delta', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['customers.id']),
        sa.ForeignKeyConstraint(['brand_id'], ['brands.id']),
        sa.ForeignKeyConstraint(['branch_id'], ['branches.id']),
        sa.ForeignKeyConstraint(['staff_id'], ['business_users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_activities_brand_created', 'activities', ['brand_id', 'created_at'])
    op.create_index('ix_activities_branch_created', 'activities', ['branch_id', 'created_at'])
    op.create_index('ix_activities_user_brand', 'activities', ['user_id', 'brand_id'])


def downgrade():
    op.drop_index('ix_activities_user_brand', table_name='activities')
    op.drop_index('ix_activities_branch_created', table_name='activities')
    op.drop_index('ix_activities_brand_created', table_name='activities')
    op.drop_table('activities')

    op.drop_index(op.f('ix_memberships_brand_id'), table_name='memberships')
    op.drop_index(op.f('ix_memberships_user_id'), table_name='memberships')
    op.drop_table('memberships')

    op.drop_index(op.f('ix_business_users_created_at'), table_name='business_users')
    op.drop_index(op.f('ix_business_users_created_by'), table_name='business_users')
    op.drop_index(op.f('ix_business_users_branch_id'), table_name='business_users')
    op.drop_index(op.f('ix_business_users_brand_id'), table_name='business_users')
    op.drop_index(op.f('ix_business_users_email'), table_name='business_users')
    op.drop_table('business_users')

    op.drop_index(op.f('ix_branches_created_at'), table_name='branches')
    op.drop_index(op.f('ix_branches_brand_id'), table_name='branches')
    op.drop_table('branches')

    op.drop_index(op.f('ix_customers_created_at'), table_name='customers')
    op.drop_index(op.f('ix_customers_email'), table_name='customers')
    op.drop_table('customers')

    op.drop_index(op.f('ix_brands_created_at'), table_name='brands')
    op.drop_index(op.f('ix_brands_name'), table_name='brands')
    op.drop_table('brands')
