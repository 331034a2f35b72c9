"""initial_event_locator_schema

Revision ID: 5b1e2c7d9a40
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '5b1e2c7d9a40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create the Event Locator schema.

    Creates the following tables:
    1. users - Accounts, home location and search preferences
    2. categories - Reference data
    3. events - Events with location and time window
    4. event_categories - Junction table events <-> categories
    5. user_categories - Junction table users <-> preferred categories

    Also creates:
    - PostGIS extension
    - GiST index on the event geography expression used by ST_DWithin
    """

    # ================================
    # Enable PostGIS extension if not already enabled
    # ================================
    op.execute('CREATE EXTENSION IF NOT EXISTS postgis')

    # ================================
    # Create users table
    # ================================
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False, comment='Auto-incrementing primary key'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, comment='Timestamp when record was created (UTC)'),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, comment='Timestamp when record was last updated (UTC)'),
        sa.Column('email', sa.String(length=255), nullable=False, comment='Login email, stored lower-case. Must be unique.'),
        sa.Column('password_hash', sa.String(length=255), nullable=False, comment="bcrypt hash of the user's password"),
        sa.Column('first_name', sa.String(length=100), nullable=False, comment='Given name'),
        sa.Column('last_name', sa.String(length=100), nullable=False, comment='Family name'),
        sa.Column('latitude', sa.Float(), nullable=True, comment='Home latitude in degrees (WGS 84)'),
        sa.Column('longitude', sa.Float(), nullable=True, comment='Home longitude in degrees (WGS 84)'),
        sa.Column('preferred_language', sa.Enum('EN', 'ES', 'FR', name='language'), nullable=False, comment='Preferred interface language (en, es, fr)'),
        sa.Column('default_radius', sa.Float(), nullable=False, comment='Default search radius in kilometers'),
        sa.CheckConstraint('(latitude IS NULL) = (longitude IS NULL)', name=op.f('ck_users_location_complete')),
        sa.CheckConstraint('default_radius > 0', name=op.f('ck_users_default_radius_positive')),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_users')),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    # ================================
    # Create categories table
    # ================================
    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False, comment='Auto-incrementing primary key'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, comment='Timestamp when record was created (UTC)'),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, comment='Timestamp when record was last updated (UTC)'),
        sa.Column('name', sa.String(length=100), nullable=False, comment='Category display name. Must be unique.'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_categories')),
        sa.UniqueConstraint('name', name=op.f('uq_categories_name')),
    )

    # ================================
    # Create events table
    # ================================
    op.create_table(
        'events',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False, comment='Auto-incrementing primary key'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, comment='Timestamp when record was created (UTC)'),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, comment='Timestamp when record was last updated (UTC)'),
        sa.Column('title', sa.String(length=255), nullable=False, comment='Event title'),
        sa.Column('description', sa.Text(), nullable=False, comment='Event description'),
        sa.Column('event_date', sa.DateTime(timezone=True), nullable=False, comment='Start of the event (UTC)'),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=True, comment='Optional end of the event (UTC)'),
        sa.Column('latitude', sa.Float(), nullable=False, comment='Latitude in degrees (WGS 84)'),
        sa.Column('longitude', sa.Float(), nullable=False, comment='Longitude in degrees (WGS 84)'),
        sa.Column('created_by', sa.Integer(), nullable=False, comment='Owning user'),
        sa.CheckConstraint('end_date IS NULL OR end_date >= event_date', name=op.f('ck_events_end_after_start')),
        sa.CheckConstraint('latitude BETWEEN -90 AND 90', name=op.f('ck_events_latitude_range')),
        sa.CheckConstraint('longitude BETWEEN -180 AND 180', name=op.f('ck_events_longitude_range')),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], name=op.f('fk_events_created_by_users'), ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_events')),
    )
    op.create_index(op.f('ix_events_event_date'), 'events', ['event_date'], unique=False)
    op.create_index(op.f('ix_events_created_by'), 'events', ['created_by'], unique=False)

    # Functional GiST index; must match Event.geography_point()
    op.execute(
        'CREATE INDEX IF NOT EXISTS ix_events_location ON events '
        'USING GIST (geography(ST_SetSRID(ST_MakePoint(longitude, latitude), 4326)))'
    )

    # ================================
    # Create junction tables
    # ================================
    op.create_table(
        'event_categories',
        sa.Column('event_id', sa.Integer(), nullable=False, comment='Foreign key to events table'),
        sa.Column('category_id', sa.Integer(), nullable=False, comment='Foreign key to categories table'),
        sa.ForeignKeyConstraint(['event_id'], ['events.id'], name=op.f('fk_event_categories_event_id_events'), ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id'], name=op.f('fk_event_categories_category_id_categories'), ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('event_id', 'category_id', name=op.f('pk_event_categories')),
    )

    op.create_table(
        'user_categories',
        sa.Column('user_id', sa.Integer(), nullable=False, comment='Foreign key to users table'),
        sa.Column('category_id', sa.Integer(), nullable=False, comment='Foreign key to categories table'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name=op.f('fk_user_categories_user_id_users'), ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id'], name=op.f('fk_user_categories_category_id_categories'), ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('user_id', 'category_id', name=op.f('pk_user_categories')),
    )


def downgrade() -> None:
    """Drop the Event Locator schema. The PostGIS extension is left in place."""
    op.drop_table('user_categories')
    op.drop_table('event_categories')
    op.execute('DROP INDEX IF EXISTS ix_events_location')
    op.drop_index(op.f('ix_events_created_by'), table_name='events')
    op.drop_index(op.f('ix_events_event_date'), table_name='events')
    op.drop_table('events')
    op.drop_table('categories')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
    sa.Enum(name='language').drop(op.get_bind(), checkfirst=True)
