"""initial_schema

Revision ID: 3f1c9a7d2b10
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7d2b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('uid', sa.String(length=128), nullable=False, comment='Identity provider uid'),
        sa.Column('email', sa.String(length=255), nullable=True, comment='Email address from the identity provider'),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('profile_photo', sa.Text(), nullable=False),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('uid'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table(
        'books',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('owner_uid', sa.String(length=128), nullable=False, comment='Identity provider uid of the owner'),
        sa.Column('owner_email', sa.String(length=255), nullable=True),
        sa.Column('owner_name', sa.String(length=255), nullable=False),
        sa.Column('title', sa.String(length=500), nullable=False),
        sa.Column('author', sa.String(length=255), nullable=False),
        sa.Column('category', sa.String(length=100), nullable=True),
        sa.Column('overview', sa.Text(), nullable=True),
        sa.Column('cover_photo', sa.Text(), nullable=True),
        sa.Column('total_pages', sa.Integer(), nullable=True),
        sa.Column('reading_status', sa.String(length=20), nullable=False),
        sa.Column('upvotes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('rating', sa.Float(), nullable=False, server_default='0'),
        sa.Column('total_reviews', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    for column in ('owner_uid', 'owner_email', 'title', 'author', 'category', 'reading_status', 'upvotes'):
        op.create_index(op.f(f'ix_books_{column}'), 'books', [column], unique=False)

    op.create_table(
        'book_upvotes',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('book_id', sa.String(length=32), nullable=False),
        sa.Column('user_uid', sa.String(length=128), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['book_id'], ['books.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('book_id', 'user_uid', name='uq_book_upvote_book_user'),
    )
    op.create_index(op.f('ix_book_upvotes_book_id'), 'book_upvotes', ['book_id'], unique=False)
    op.create_index(op.f('ix_book_upvotes_user_uid'), 'book_upvotes', ['user_uid'], unique=False)

    op.create_table(
        'bookmarks',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('book_id', sa.String(length=32), nullable=False),
        sa.Column('user_uid', sa.String(length=128), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['book_id'], ['books.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('book_id', 'user_uid', name='uq_bookmark_book_user'),
    )
    op.create_index(op.f('ix_bookmarks_book_id'), 'bookmarks', ['book_id'], unique=False)
    op.create_index(op.f('ix_bookmarks_user_uid'), 'bookmarks', ['user_uid'], unique=False)

    op.create_table(
        'reviews',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('book_id', sa.String(length=32), nullable=False),
        sa.Column('user_uid', sa.String(length=128), nullable=False),
        sa.Column('user_name', sa.String(length=255), nullable=False),
        sa.Column('user_photo', sa.Text(), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('review_text', sa.Text(), nullable=True),
        sa.Column('likes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('dislikes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('rating >= 1 AND rating <= 5', name='ck_review_rating_range'),
        sa.ForeignKeyConstraint(['book_id'], ['books.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('book_id', 'user_uid', name='uq_review_book_user'),
    )
    op.create_index(op.f('ix_reviews_book_id'), 'reviews', ['book_id'], unique=False)
    op.create_index(op.f('ix_reviews_user_uid'), 'reviews', ['user_uid'], unique=False)

    op.create_table(
        'review_votes',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('review_id', sa.String(length=32), nullable=False),
        sa.Column('user_uid', sa.String(length=128), nullable=False),
        sa.Column('kind', sa.String(length=10), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['review_id'], ['reviews.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('review_id', 'user_uid', name='uq_review_vote_review_user'),
    )
    op.create_index(op.f('ix_review_votes_review_id'), 'review_votes', ['review_id'], unique=False)
    op.create_index(op.f('ix_review_votes_user_uid'), 'review_votes', ['user_uid'], unique=False)


def downgrade() -> None:
    op.drop_table('review_votes')
    op.drop_table('reviews')
    op.drop_table('bookmarks')
    op.drop_table('book_upvotes')
    for column in ('upvotes', 'reading_status', 'category', 'author', 'title', 'owner_email', 'owner_uid'):
        op.drop_index(op.f(f'ix_books_{column}'), table_name='books')
    op.drop_table('books')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
