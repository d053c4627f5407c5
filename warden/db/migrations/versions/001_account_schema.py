"""Create account tables.

Revision ID: 001
Revises:
Create Date: 2025-01-31

Tables: profiles, login_history, profile_changes

Targets a managed Postgres that owns an auth.users table and the
auth.uid() helper. A profile row is provisioned by trigger whenever
an auth user is created.
"""

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import UUID

revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create account tables, read/update policies and provisioning trigger."""
    op.create_table(
        "profiles",
        sa.Column(
            "id",
            UUID,
            sa.ForeignKey("auth.users.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("first_name", sa.Text, nullable=False),
        sa.Column("last_name", sa.Text, nullable=False),
        sa.Column("phone_number", sa.Text),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        schema="public",
    )

    # Subject columns are text: a failed sign-in stores the submitted email
    op.create_table(
        "login_history",
        sa.Column(
            "id", UUID, primary_key=True, server_default=sa.text("gen_random_uuid()")
        ),
        sa.Column("user_id", sa.Text, nullable=False),
        sa.Column(
            "login_timestamp",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.Column(
            "ip_address", sa.Text, server_default=sa.text("inet_client_addr()::text")
        ),
        sa.Column("device_info", sa.Text),
        sa.Column("success", sa.Boolean, nullable=False),
        sa.Column("failure_reason", sa.Text),
        sa.CheckConstraint(
            "success = false OR failure_reason IS NULL",
            name="chk_login_failure_reason",
        ),
        schema="public",
    )
    op.create_index(
        "idx_login_history_user", "login_history", ["user_id", "login_timestamp"]
    )

    op.create_table(
        "profile_changes",
        sa.Column(
            "id", UUID, primary_key=True, server_default=sa.text("gen_random_uuid()")
        ),
        sa.Column("user_id", sa.Text, nullable=False),
        sa.Column("field_changed", sa.Text, nullable=False),
        sa.Column("old_value", sa.Text),
        sa.Column("new_value", sa.Text),
        sa.Column(
            "change_timestamp",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.Column("changed_by", sa.Text),
        sa.CheckConstraint(
            "field_changed IN ('first_name', 'last_name', 'phone_number')",
            name="chk_profile_changes_field",
        ),
        schema="public",
    )
    op.create_index(
        "idx_profile_changes_user", "profile_changes", ["user_id", "change_timestamp"]
    )

    for table in ("profiles", "login_history", "profile_changes"):
        op.execute(f"ALTER TABLE public.{table} ENABLE ROW LEVEL SECURITY")

    op.execute(
        """
        CREATE POLICY "Users can view own profile" ON public.profiles
        FOR SELECT TO authenticated USING (auth.uid() = id)
        """
    )
    op.execute(
        """
        CREATE POLICY "Users can update own profile" ON public.profiles
        FOR UPDATE TO authenticated USING (auth.uid() = id)
        """
    )
    op.execute(
        """
        CREATE POLICY "Users can view own login history" ON public.login_history
        FOR SELECT TO authenticated USING (auth.uid()::text = user_id)
        """
    )
    op.execute(
        """
        CREATE POLICY "Users can view own profile changes" ON public.profile_changes
        FOR SELECT TO authenticated USING (auth.uid()::text = user_id)
        """
    )

    op.execute(
        """
        CREATE OR REPLACE FUNCTION public.handle_new_user()
        RETURNS TRIGGER AS $$
        BEGIN
          INSERT INTO public.profiles (id, first_name, last_name, phone_number)
          VALUES (
            NEW.id,
            COALESCE(NEW.raw_user_meta_data->>'first_name', ''),
            COALESCE(NEW.raw_user_meta_data->>'last_name', ''),
            NULLIF(NEW.raw_user_meta_data->>'phone_number', '')
          );
          RETURN NEW;
        END;
        $$ LANGUAGE plpgsql SECURITY DEFINER
        """
    )
    op.execute(
        """
        CREATE TRIGGER on_auth_user_created
        AFTER INSERT ON auth.users
        FOR EACH ROW EXECUTE FUNCTION public.handle_new_user()
        """
    )


def downgrade() -> None:
    """Drop account tables and provisioning trigger."""
    op.execute("DROP TRIGGER IF EXISTS on_auth_user_created ON auth.users")
    op.execute("DROP FUNCTION IF EXISTS public.handle_new_user()")
    op.drop_table("profile_changes", schema="public")
    op.drop_table("login_history", schema="public")
    op.drop_table("profiles", schema="public")
