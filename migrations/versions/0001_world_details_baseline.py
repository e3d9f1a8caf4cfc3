"""world details baseline

Revision ID: 0001_world_details
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_world_details'
down_revision = None
branch_labels = None
depends_on = None

# table -> (column, length) pairs; each also gets id + world_id
VALUE_TABLES = {
    'world_tags': [('value', 80)],
    'world_climates': [('value', 80)],
    'world_magic_systems': [('system', 80)],
    'world_magic_customs': [('name', 80)],
    'world_bans': [('value', 80)],
    'world_tone_flags': [('flag', 80)],
    'world_languages': [('value', 80)],
    'world_deities': [('value', 80)],
    'world_factions': [('value', 80)],
}
ORDERED_VALUE_TABLES = {
    'world_weekdays': [('value', 20)],
    'world_unbreakables': [('value', 120)],
}


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def _world_fk():
    return sa.Column(
        'world_id',
        sa.Integer(),
        sa.ForeignKey('worlds.id', ondelete='CASCADE'),
        nullable=False,
    )


def _child_table(name, *columns):
    op.create_table(
        name,
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        _world_fk(),
        *columns,
    )
    op.create_index(op.f(f'ix_{name}_world_id'), name, ['world_id'])


def _catalog_tables(catalog, join_table, member):
    op.create_table(
        catalog,
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.Text(), nullable=False, unique=True),
        sa.Column('description', sa.Text()),
        *_timestamps(),
    )
    op.create_table(
        join_table,
        sa.Column(
            'world_id',
            sa.Integer(),
            sa.ForeignKey('worlds.id', ondelete='CASCADE'),
            primary_key=True,
        ),
        sa.Column(
            member,
            sa.Integer(),
            sa.ForeignKey(f'{catalog}.id', ondelete='CASCADE'),
            primary_key=True,
        ),
    )


def upgrade():
    op.create_table(
        'worlds',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.Text(), nullable=False, unique=True),
        sa.Column('description', sa.Text()),
        *_timestamps(),
    )
    op.create_table(
        'world_details',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            'world_id',
            sa.Integer(),
            sa.ForeignKey('worlds.id', ondelete='CASCADE'),
            nullable=False,
            unique=True,
        ),
        sa.Column('pitch', sa.Text()),
        sa.Column('suns_count', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('day_hours', sa.Float()),
        sa.Column('year_days', sa.Integer()),
        sa.Column('leap_rule', sa.Text()),
        sa.Column('planet_type', sa.String(40), nullable=False, server_default='Terrestrial'),
        sa.Column('planet_type_note', sa.Text()),
        sa.Column('size_class', sa.String(40)),
        sa.Column('gravity_vs_earth', sa.Float()),
        sa.Column('water_pct', sa.Integer()),
        sa.Column('tectonics', sa.String(40), nullable=False, server_default='Medium'),
        sa.Column('source_statement', sa.Text()),
        sa.Column('corruption_level', sa.String(40), nullable=False, server_default='Moderate'),
        sa.Column('corruption_note', sa.Text()),
        sa.Column('tech_from', sa.String(40), nullable=False, server_default='Iron'),
        sa.Column('tech_to', sa.String(40), nullable=False, server_default='Industrial'),
        sa.Column(
            'player_safe_summary_on', sa.Boolean(), nullable=False, server_default=sa.true()
        ),
        *_timestamps(),
    )

    for name, columns in VALUE_TABLES.items():
        _child_table(
            name, *(sa.Column(col, sa.String(length), nullable=False) for col, length in columns)
        )
    for name, columns in ORDERED_VALUE_TABLES.items():
        _child_table(
            name,
            *(sa.Column(col, sa.String(length), nullable=False) for col, length in columns),
            sa.Column('order_index', sa.Integer(), nullable=False, server_default='0'),
        )
    _child_table(
        'world_moons',
        sa.Column('name', sa.String(40), nullable=False),
        sa.Column('cycle_days', sa.Integer()),
        sa.Column('omen', sa.String(120)),
        sa.Column('order_index', sa.Integer(), nullable=False, server_default='0'),
    )
    _child_table(
        'world_months',
        sa.Column('name', sa.String(30), nullable=False),
        sa.Column('days', sa.Integer(), nullable=False, server_default='30'),
        sa.Column('order_index', sa.Integer(), nullable=False, server_default='0'),
    )
    _child_table(
        'world_realms',
        sa.Column('name', sa.String(40), nullable=False),
        sa.Column('type', sa.String(40)),
        sa.Column('traits', sa.String(80)),
        sa.Column('travel', sa.String(80)),
        sa.Column('bleed', sa.String(80)),
        sa.Column('order_index', sa.Integer(), nullable=False, server_default='0'),
    )

    _catalog_tables('races', 'world_race_catalog', 'race_id')
    _catalog_tables('creatures', 'world_creature_catalog', 'creature_id')


def downgrade():
    op.drop_table('world_creature_catalog')
    op.drop_table('world_race_catalog')
    op.drop_table('creatures')
    op.drop_table('races')
    for name in [
        'world_realms',
        'world_months',
        'world_moons',
        *ORDERED_VALUE_TABLES,
        *VALUE_TABLES,
    ]:
        op.drop_index(op.f(f'ix_{name}_world_id'), table_name=name)
        op.drop_table(name)
    op.drop_table('world_details')
    op.drop_table('worlds')
