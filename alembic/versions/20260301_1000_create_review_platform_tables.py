"""create_review_platform_tables

Revision ID: 20260301_1000_create_review_platform_tables
Revises:
Create Date: 2026-03-01 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20260301_1000_create_review_platform_tables'
down_revision = None
branch_labels = None
depends_on = None


user_role = sa.Enum('CUSTOMER', 'ADMIN', name='user_role')
auth_provider = sa.Enum('GOOGLE', 'FACEBOOK', 'GITHUB', name='auth_provider')
feedback_status = sa.Enum('NEW', 'IN_PROGRESS', 'RESOLVED', 'CLOSED', name='feedback_status')


def upgrade():
    # Create users table
    op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('image_url', sa.String(length=500), nullable=True),
        sa.Column('provider', auth_provider, nullable=False),
        sa.Column('provider_id', sa.String(length=255), nullable=False),
        sa.Column('role', user_role, nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('provider', 'provider_id', name='uq_users_provider_identity')
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # Create business_profiles table
    op.create_table('business_profiles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('business_name', sa.String(length=255), nullable=False),
        sa.Column('phone_number', sa.String(length=20), nullable=True),
        sa.Column('address', sa.String(length=500), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('facebook_url', sa.String(length=500), nullable=True),
        sa.Column('instagram_url', sa.String(length=500), nullable=True),
        sa.Column('twitter_url', sa.String(length=500), nullable=True),
        sa.Column('linkedin_url', sa.String(length=500), nullable=True),
        sa.Column('website_url', sa.String(length=500), nullable=True),
        sa.Column('google_review_url', sa.String(length=500), nullable=True),
        sa.Column('image_name', sa.String(length=255), nullable=True),
        sa.Column('image_type', sa.String(length=100), nullable=True),
        sa.Column('image_data', sa.LargeBinary(), nullable=True),
        sa.Column('created_by_id', sa.Integer(), nullable=True),
        sa.Column('average_rating', sa.Float(), server_default='0', nullable=False),
        sa.Column('total_reviews', sa.Integer(), server_default='0', nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['created_by_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_business_profiles_id', 'business_profiles', ['id'])
    op.create_index('ix_business_profiles_business_name', 'business_profiles', ['business_name'])
    op.create_index('ix_business_profiles_created_by_id', 'business_profiles', ['created_by_id'])
    op.create_index('idx_business_profiles_rating', 'business_profiles', ['average_rating'])

    # Create reviews table
    op.create_table('reviews',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('business_profile_id', sa.Integer(), nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=True),
        sa.Column('is_anonymous', sa.Boolean(), nullable=False),
        sa.Column('customer_name', sa.String(length=255), nullable=True),
        sa.Column('customer_email', sa.String(length=255), nullable=True),
        sa.Column('customer_phone', sa.String(length=20), nullable=True),
        sa.Column('redirected_to_google', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint('rating >= 1 AND rating <= 5', name='ck_reviews_rating_range'),
        sa.ForeignKeyConstraint(['business_profile_id'], ['business_profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['customer_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('customer_id', 'business_profile_id', name='uq_reviews_customer_business')
    )
    op.create_index('ix_reviews_id', 'reviews', ['id'])
    op.create_index('ix_reviews_rating', 'reviews', ['rating'])
    op.create_index('ix_reviews_business_profile_id', 'reviews', ['business_profile_id'])
    op.create_index('ix_reviews_customer_id', 'reviews', ['customer_id'])
    op.create_index('idx_reviews_business_rating', 'reviews', ['business_profile_id', 'rating'])

    # Create feedback table
    op.create_table('feedback',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('review_id', sa.Integer(), nullable=False),
        sa.Column('feedback_text', sa.Text(), nullable=True),
        sa.Column('service_quality', sa.String(length=255), nullable=True),
        sa.Column('staff_behavior', sa.String(length=255), nullable=True),
        sa.Column('cleanliness', sa.String(length=255), nullable=True),
        sa.Column('value_for_money', sa.String(length=255), nullable=True),
        sa.Column('overall_experience', sa.String(length=255), nullable=True),
        sa.Column('suggestions', sa.Text(), nullable=True),
        sa.Column('contact_email', sa.String(length=255), nullable=True),
        sa.Column('contact_phone', sa.String(length=20), nullable=True),
        sa.Column('wants_followup', sa.Boolean(), nullable=False),
        sa.Column('status', feedback_status, nullable=False),
        sa.Column('admin_response', sa.Text(), nullable=True),
        sa.Column('responded_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['review_id'], ['reviews.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_feedback_id', 'feedback', ['id'])
    op.create_index('ix_feedback_review_id', 'feedback', ['review_id'], unique=True)
    op.create_index('ix_feedback_status', 'feedback', ['status'])
    op.create_index('idx_feedback_status_created', 'feedback', ['status', 'created_at'])


def downgrade():
    op.drop_table('feedback')
    op.drop_table('reviews')
    op.drop_table('business_profiles')
    op.drop_table('users')

    bind = op.get_bind()
    feedback_status.drop(bind, checkfirst=True)
    user_role.drop(bind, checkfirst=True)
    auth_provider.drop(bind, checkfirst=True)
