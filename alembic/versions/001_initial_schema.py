"""Initial schema for VideoTube

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-16 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    """Create every table"""

    # Accounts
    op.create_table('users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('refresh_token', sa.Text(), nullable=True),
        sa.Column('full_name', sa.String(length=100), nullable=False),
        sa.Column('avatar_url', sa.String(length=500), nullable=False),
        sa.Column('avatar_public_id', sa.String(length=255), nullable=True),
        sa.Column('cover_image_url', sa.String(length=500), nullable=True),
        sa.Column('cover_image_public_id', sa.String(length=255), nullable=True),
        sa.Column('is_email_verified', sa.Boolean(), nullable=False),
        sa.Column('password_reset_token', sa.String(length=64), nullable=True),
        sa.Column('password_reset_expires', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_users'),
        sa.UniqueConstraint('email', name='uq_users_email')
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_full_name', 'users', ['full_name'])
    op.create_index('ix_users_password_reset_token', 'users', ['password_reset_token'])

    # Registrations awaiting email verification
    op.create_table('pending_users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=100), nullable=False),
        sa.Column('avatar_url', sa.String(length=500), nullable=False),
        sa.Column('avatar_public_id', sa.String(length=255), nullable=True),
        sa.Column('cover_image_url', sa.String(length=500), nullable=True),
        sa.Column('cover_image_public_id', sa.String(length=255), nullable=True),
        sa.Column('verification_token', sa.String(length=64), nullable=True),
        sa.Column('verification_expires', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_pending_users')
    )
    op.create_index('ix_pending_users_email', 'pending_users', ['email'], unique=True)
    op.create_index('ix_pending_users_username', 'pending_users', ['username'], unique=True)
    op.create_index('ix_pending_users_verification_token', 'pending_users', ['verification_token'])
    op.create_index('ix_pending_users_created_at', 'pending_users', ['created_at'])

    op.create_table('videos',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('video_url', sa.String(length=500), nullable=False),
        sa.Column('video_public_id', sa.String(length=255), nullable=True),
        sa.Column('thumbnail_url', sa.String(length=500), nullable=False),
        sa.Column('thumbnail_public_id', sa.String(length=255), nullable=True),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('views', sa.Integer(), nullable=False),
        sa.Column('is_published', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], name='fk_videos_owner_id_users'),
        sa.PrimaryKeyConstraint('id', name='pk_videos')
    )
    op.create_index('ix_videos_owner_id', 'videos', ['owner_id'])
    op.create_index('ix_videos_owner_created', 'videos', ['owner_id', 'created_at'])
    op.create_index('ix_videos_published_created', 'videos', ['is_published', 'created_at'])

    # Community posts ("tweets")
    op.create_table('posts',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], name='fk_posts_owner_id_users'),
        sa.PrimaryKeyConstraint('id', name='pk_posts')
    )
    op.create_index('ix_posts_owner_id', 'posts', ['owner_id'])

    op.create_table('comments',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.Column('video_id', sa.Uuid(), nullable=True),
        sa.Column('post_id', sa.Uuid(), nullable=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('(video_id IS NULL) <> (post_id IS NULL)', name='ck_comments_one_parent'),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], name='fk_comments_owner_id_users'),
        sa.ForeignKeyConstraint(['video_id'], ['videos.id'], name='fk_comments_video_id_videos'),
        sa.ForeignKeyConstraint(['post_id'], ['posts.id'], name='fk_comments_post_id_posts'),
        sa.PrimaryKeyConstraint('id', name='pk_comments')
    )
    op.create_index('ix_comments_owner_id', 'comments', ['owner_id'])
    op.create_index('ix_comments_video_created', 'comments', ['video_id', 'created_at'])
    op.create_index('ix_comments_post_created', 'comments', ['post_id', 'created_at'])

    op.create_table('likes',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('liked_by_id', sa.Uuid(), nullable=False),
        sa.Column('video_id', sa.Uuid(), nullable=True),
        sa.Column('comment_id', sa.Uuid(), nullable=True),
        sa.Column('post_id', sa.Uuid(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            '(CASE WHEN video_id IS NULL THEN 0 ELSE 1 END)'
            ' + (CASE WHEN comment_id IS NULL THEN 0 ELSE 1 END)'
            ' + (CASE WHEN post_id IS NULL THEN 0 ELSE 1 END) = 1',
            name='ck_likes_one_target'
        ),
        sa.ForeignKeyConstraint(['liked_by_id'], ['users.id'], name='fk_likes_liked_by_id_users'),
        sa.ForeignKeyConstraint(['video_id'], ['videos.id'], name='fk_likes_video_id_videos'),
        sa.ForeignKeyConstraint(['comment_id'], ['comments.id'], name='fk_likes_comment_id_comments'),
        sa.ForeignKeyConstraint(['post_id'], ['posts.id'], name='fk_likes_post_id_posts'),
        sa.PrimaryKeyConstraint('id', name='pk_likes'),
        sa.UniqueConstraint('liked_by_id', 'video_id', name='uq_like_user_video'),
        sa.UniqueConstraint('liked_by_id', 'comment_id', name='uq_like_user_comment'),
        sa.UniqueConstraint('liked_by_id', 'post_id', name='uq_like_user_post')
    )
    op.create_index('ix_likes_liked_by_id', 'likes', ['liked_by_id'])
    op.create_index('ix_likes_video_id', 'likes', ['video_id'])
    op.create_index('ix_likes_comment_id', 'likes', ['comment_id'])
    op.create_index('ix_likes_post_id', 'likes', ['post_id'])

    op.create_table('subscriptions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('subscriber_id', sa.Uuid(), nullable=False),
        sa.Column('channel_id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('subscriber_id <> channel_id', name='ck_subscriptions_no_self_subscription'),
        sa.ForeignKeyConstraint(['subscriber_id'], ['users.id'], name='fk_subscriptions_subscriber_id_users'),
        sa.ForeignKeyConstraint(['channel_id'], ['users.id'], name='fk_subscriptions_channel_id_users'),
        sa.PrimaryKeyConstraint('id', name='pk_subscriptions'),
        sa.UniqueConstraint('subscriber_id', 'channel_id', name='uq_subscription_pair')
    )
    op.create_index('ix_subscriptions_subscriber_id', 'subscriptions', ['subscriber_id'])
    op.create_index('ix_subscriptions_channel_id', 'subscriptions', ['channel_id'])

    op.create_table('notifications',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('recipient_id', sa.Uuid(), nullable=False),
        sa.Column('sender_id', sa.Uuid(), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('video_id', sa.Uuid(), nullable=True),
        sa.Column('comment_id', sa.Uuid(), nullable=True),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['recipient_id'], ['users.id'], name='fk_notifications_recipient_id_users', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['sender_id'], ['users.id'], name='fk_notifications_sender_id_users', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['video_id'], ['videos.id'], name='fk_notifications_video_id_videos', ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['comment_id'], ['comments.id'], name='fk_notifications_comment_id_comments', ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id', name='pk_notifications')
    )
    op.create_index('idx_recipient_unread', 'notifications', ['recipient_id', 'is_read'])
    op.create_index('idx_recipient_created', 'notifications', ['recipient_id', 'created_at'])

    op.create_table('playlists',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], name='fk_playlists_owner_id_users'),
        sa.PrimaryKeyConstraint('id', name='pk_playlists')
    )
    op.create_index('ix_playlists_owner_id', 'playlists', ['owner_id'])

    op.create_table('playlist_videos',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('playlist_id', sa.Uuid(), nullable=False),
        sa.Column('video_id', sa.Uuid(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('added_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['playlist_id'], ['playlists.id'], name='fk_playlist_videos_playlist_id_playlists'),
        sa.ForeignKeyConstraint(['video_id'], ['videos.id'], name='fk_playlist_videos_video_id_videos'),
        sa.PrimaryKeyConstraint('id', name='pk_playlist_videos'),
        sa.UniqueConstraint('playlist_id', 'video_id', name='uq_playlist_video')
    )
    op.create_index('ix_playlist_videos_playlist_id', 'playlist_videos', ['playlist_id'])
    op.create_index('ix_playlist_videos_video_id', 'playlist_videos', ['video_id'])

    op.create_table('watch_history',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('video_id', sa.Uuid(), nullable=False),
        sa.Column('watched_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_watch_history_user_id_users'),
        sa.ForeignKeyConstraint(['video_id'], ['videos.id'], name='fk_watch_history_video_id_videos'),
        sa.PrimaryKeyConstraint('id', name='pk_watch_history'),
        sa.UniqueConstraint('user_id', 'video_id', name='uq_watch_history_user_video')
    )
    op.create_index('ix_watch_history_video_id', 'watch_history', ['video_id'])
    op.create_index('ix_watch_history_user_watched', 'watch_history', ['user_id', 'watched_at'])


def downgrade():
    """Drop every table"""
    op.drop_table('watch_history')
    op.drop_table('playlist_videos')
    op.drop_table('playlists')
    op.drop_table('notifications')
    op.drop_table('subscriptions')
    op.drop_table('likes')
    op.drop_table('comments')
    op.drop_table('posts')
    op.drop_table('videos')
    op.drop_table('pending_users')
    op.drop_table('users')
