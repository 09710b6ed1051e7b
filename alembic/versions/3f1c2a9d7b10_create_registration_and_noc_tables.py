"""Create registration, reference and NOC tables

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-16 10:12:44.318204
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'nationalities',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.UniqueConstraint('name', name='uq_nationalities_name'),
        comment='Pre-seeded nationality options for registration'
    )
    op.create_table(
        'registration_categories',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.UniqueConstraint('name', name='uq_registration_categories_name'),
        comment='Pre-seeded registration categories'
    )

    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True, comment='Unique identifier for the user'),
        sa.Column('nationality_id', sa.Integer(), nullable=False),
        sa.Column('regcategory_id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('mobile_number', sa.String(length=20), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('f_name', sa.String(length=100), nullable=False),
        sa.Column('m_name', sa.String(length=100), nullable=True),
        sa.Column('l_name', sa.String(length=100), nullable=False),
        sa.Column('father_name', sa.String(length=150), nullable=False),
        sa.Column('mother_name', sa.String(length=150), nullable=False),
        sa.Column('place', sa.String(length=150), nullable=False),
        sa.Column('dob', sa.Date(), nullable=False),
        sa.Column('category', sa.String(length=50), nullable=False),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('pan_number', sa.String(length=20), nullable=False),
        sa.Column('aadhaar_number', sa.String(length=20), nullable=False),
        sa.Column('regtype', sa.String(length=50), nullable=False),
        sa.Column('bds_qualification_year', sa.String(length=7), nullable=True),
        sa.Column('mds_qualification_year', sa.String(length=7), nullable=True),
        sa.Column('bds_certificate_upload', sa.String(length=500), nullable=True),
        sa.Column('mds_certificate_upload', sa.String(length=500), nullable=True),
        sa.Column('internship_certificate_upload', sa.String(length=500), nullable=True),
        sa.Column('ssc_certificate_upload', sa.String(length=500), nullable=True),
        sa.Column('aadhaar_upload', sa.String(length=500), nullable=True),
        sa.Column('pan_upload', sa.String(length=500), nullable=True),
        sa.Column('reset_password_token', sa.String(length=64), nullable=True, comment='sha256 hex of the emailed token'),
        sa.Column('reset_password_expires', sa.DateTime(), nullable=True, comment='Naive UTC expiry of the reset token'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['nationality_id'], ['nationalities.id'], name='fk_user_nationality'),
        sa.ForeignKeyConstraint(['regcategory_id'], ['registration_categories.id'], name='fk_user_regcategory'),
        comment='Registered council members'
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_mobile_number', 'users', ['mobile_number'], unique=True)
    op.create_index('ix_users_reset_password_token', 'users', ['reset_password_token'])

    op.create_table(
        'noc_applications',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), nullable=False, comment='Owner of the application'),
        sa.Column('dental_council_name', sa.String(length=255), nullable=False),
        sa.Column('postal_address', sa.Text(), nullable=False),
        sa.Column('documents', sa.JSON(), nullable=False, comment='Form field name to remote URL'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_noc_user', ondelete='CASCADE'),
        comment='No Objection Certificate applications'
    )
    op.create_index('ix_noc_applications_id', 'noc_applications', ['id'])
    op.create_index('ix_noc_applications_user_id', 'noc_applications', ['user_id'])
    op.create_index('ix_noc_applications_created_at', 'noc_applications', ['created_at'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('noc_applications')
    op.drop_table('users')
    op.drop_table('registration_categories')
    op.drop_table('nationalities')
