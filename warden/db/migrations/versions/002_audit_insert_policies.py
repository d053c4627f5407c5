"""Allow callers to append their own audit rows.

Revision ID: 002
Revises: 001
Create Date: 2025-01-31

Profile changes are insertable only for the caller's own identity.
Login history is also insertable anonymously so failed sign-ins,
which have no authenticated identity, can still be recorded.
Neither table gets UPDATE or DELETE policies.
"""

from alembic import op

revision = "002"
down_revision = "001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute(
        """
        CREATE POLICY "Users can insert own profile changes" ON public.profile_changes
        FOR INSERT TO authenticated
        WITH CHECK (auth.uid()::text = user_id)
        """
    )
    op.execute(
        """
        CREATE POLICY "Users can insert own login history" ON public.login_history
        FOR INSERT TO authenticated, anon
        WITH CHECK (auth.uid()::text = user_id OR auth.uid() IS NULL)
        """
    )


def downgrade() -> None:
    op.execute(
        'DROP POLICY IF EXISTS "Users can insert own login history" ON public.login_history'
    )
    op.execute(
        'DROP POLICY IF EXISTS "Users can insert own profile changes" ON public.profile_changes'
    )
