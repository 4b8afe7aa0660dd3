"""Triggers: updated_at maintenance, activity logging, theme usage and series sermon counts.

Revision ID: 20250115_0014_triggers
Revises: 20250115_0013_export_history
Create Date: 2025-01-15

- update_updated_at_column(): BEFORE UPDATE on every table with an updated_at
  column, join tables included.
- log_activity(): AFTER INSERT/UPDATE/DELETE on sermons, sermon_series, themes
  and media_resources writes one activity_logs row per change. Nothing is
  logged once the owning workspace is gone, so deleting a workspace still
  cascades.
- update_theme_usage_count(): AFTER INSERT/DELETE on sermon_themes keeps
  themes.sermon_count and themes.last_used current.
- update_series_sermon_count(): AFTER INSERT/UPDATE/DELETE on sermons keeps
  sermon_series.actual_sermons current.
Counts never go below zero.
"""

from collections.abc import Sequence

from alembic import op

revision: str = "20250115_0014_triggers"
down_revision: str | None = "20250115_0013_export_history"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

UPDATED_AT_TABLES = (
    "organizations",
    "workspaces",
    "users",
    "themes",
    "sermon_series",
    "sermons",
    "sermon_themes",
    "series_themes",
    "media_resources",
    "collaborators",
    "export_history",
)

ACTIVITY_TABLES = ("sermons", "sermon_series", "themes", "media_resources")

_UPDATED_AT_FUNCTION = "update_updated_at_column"
_ACTIVITY_FUNCTION = "log_activity"
_THEME_USAGE_FUNCTION = "update_theme_usage_count"
_SERIES_COUNT_FUNCTION = "update_series_sermon_count"
_THEME_USAGE_TRIGGER = "trigger_sermon_themes_update_usage"
_SERIES_COUNT_TRIGGER = "trigger_sermons_update_series_count"


def _updated_at_trigger(table: str) -> str:
    return f"trigger_{table}_updated_at"


def _activity_trigger(table: str) -> str:
    return f"trigger_{table}_activity_log"


def upgrade() -> None:
    op.execute(
        f"""
        CREATE OR REPLACE FUNCTION {_UPDATED_AT_FUNCTION}()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = CURRENT_TIMESTAMP;
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
        """
    )
    op.execute(
        f"""
        CREATE OR REPLACE FUNCTION {_ACTIVITY_FUNCTION}()
        RETURNS TRIGGER AS $$
        DECLARE
            action_type text;
            entity_kind text;
            entity_label text;
            workspace_uuid uuid;
            user_uuid uuid;
            changes_json jsonb := '{{}}'::jsonb;
        BEGIN
            action_type := CASE TG_OP
                WHEN 'INSERT' THEN 'create'
                WHEN 'UPDATE' THEN 'update'
                ELSE 'delete'
            END;

            CASE TG_TABLE_NAME
                WHEN 'sermons' THEN
                    entity_kind := 'sermon';
                    workspace_uuid := COALESCE(NEW.workspace_id, OLD.workspace_id);
                    user_uuid := COALESCE(NEW.created_by, OLD.created_by);
                    entity_label := COALESCE(NEW.title, OLD.title);
                    IF TG_OP = 'UPDATE' THEN
                        changes_json := jsonb_build_object(
                            'title', jsonb_build_object('old', OLD.title, 'new', NEW.title),
                            'status', jsonb_build_object('old', OLD.status, 'new', NEW.status),
                            'service_date', jsonb_build_object(
                                'old', OLD.service_date, 'new', NEW.service_date
                            )
                        );
                    END IF;
                WHEN 'sermon_series' THEN
                    entity_kind := 'series';
                    workspace_uuid := COALESCE(NEW.workspace_id, OLD.workspace_id);
                    user_uuid := COALESCE(NEW.created_by, OLD.created_by);
                    entity_label := COALESCE(NEW.title, OLD.title);
                    IF TG_OP = 'UPDATE' THEN
                        changes_json := jsonb_build_object(
                            'title', jsonb_build_object('old', OLD.title, 'new', NEW.title),
                            'status', jsonb_build_object('old', OLD.status, 'new', NEW.status)
                        );
                    END IF;
                WHEN 'media_resources' THEN
                    entity_kind := 'resource';
                    workspace_uuid := COALESCE(NEW.workspace_id, OLD.workspace_id);
                    user_uuid := COALESCE(NEW.uploaded_by, OLD.uploaded_by);
                    entity_label := COALESCE(NEW.title, OLD.title);
                WHEN 'themes' THEN
                    entity_kind := 'theme';
                    workspace_uuid := COALESCE(NEW.workspace_id, OLD.workspace_id);
                    user_uuid := COALESCE(NEW.created_by, OLD.created_by);
                    entity_label := COALESCE(NEW.name, OLD.name);
                ELSE
                    RETURN COALESCE(NEW, OLD);
            END CASE;

            -- no log rows for a workspace deleted in this statement
            IF NOT EXISTS (SELECT 1 FROM workspaces WHERE id = workspace_uuid) THEN
                RETURN COALESCE(NEW, OLD);
            END IF;

            INSERT INTO activity_logs (
                workspace_id,
                user_id,
                action,
                entity_type,
                entity_id,
                entity_name,
                description,
                changes,
                status
            ) VALUES (
                workspace_uuid,
                user_uuid,
                action_type,
                entity_kind,
                COALESCE(NEW.id, OLD.id),
                entity_label,
                CASE action_type
                    WHEN 'create' THEN 'Created '
                    WHEN 'update' THEN 'Updated '
                    ELSE 'Deleted '
                END || entity_kind || ': ' || COALESCE(entity_label, ''),
                changes_json,
                'success'
            );

            RETURN COALESCE(NEW, OLD);
        END;
        $$ LANGUAGE plpgsql;
        """
    )
    op.execute(
        f"""
        CREATE OR REPLACE FUNCTION {_SERIES_COUNT_FUNCTION}()
        RETURNS TRIGGER AS $$
        BEGIN
            IF TG_OP = 'INSERT' AND NEW.series_id IS NOT NULL THEN
                UPDATE sermon_series
                SET actual_sermons = actual_sermons + 1
                WHERE id = NEW.series_id;
            ELSIF TG_OP = 'DELETE' AND OLD.series_id IS NOT NULL THEN
                UPDATE sermon_series
                SET actual_sermons = GREATEST(0, actual_sermons - 1)
                WHERE id = OLD.series_id;
            ELSIF TG_OP = 'UPDATE' AND OLD.series_id IS DISTINCT FROM NEW.series_id THEN
                IF OLD.series_id IS NOT NULL THEN
                    UPDATE sermon_series
                    SET actual_sermons = GREATEST(0, actual_sermons - 1)
                    WHERE id = OLD.series_id;
                END IF;
                IF NEW.series_id IS NOT NULL THEN
                    UPDATE sermon_series
                    SET actual_sermons = actual_sermons + 1
                    WHERE id = NEW.series_id;
                END IF;
            END IF;
            RETURN COALESCE(NEW, OLD);
        END;
        $$ LANGUAGE plpgsql;
        """
    )
    op.execute(
        f"""
        CREATE OR REPLACE FUNCTION {_THEME_USAGE_FUNCTION}()
        RETURNS TRIGGER AS $$
        BEGIN
            IF TG_OP = 'INSERT' THEN
                UPDATE themes
                SET sermon_count = sermon_count + 1,
                    last_used = CURRENT_TIMESTAMP
                WHERE id = NEW.theme_id;
            ELSIF TG_OP = 'DELETE' THEN
                UPDATE themes
                SET sermon_count = GREATEST(0, sermon_count - 1),
                    last_used = (
                        SELECT MAX(s.service_date)
                        FROM sermons s
                        JOIN sermon_themes st ON s.id = st.sermon_id
                        WHERE st.theme_id = OLD.theme_id
                    )
                WHERE id = OLD.theme_id;
            END IF;
            RETURN COALESCE(NEW, OLD);
        END;
        $$ LANGUAGE plpgsql;
        """
    )

    for table in UPDATED_AT_TABLES:
        op.execute(f"DROP TRIGGER IF EXISTS {_updated_at_trigger(table)} ON {table};")
        op.execute(
            f"""
            CREATE TRIGGER {_updated_at_trigger(table)}
            BEFORE UPDATE ON {table}
            FOR EACH ROW EXECUTE FUNCTION {_UPDATED_AT_FUNCTION}();
            """
        )

    for table in ACTIVITY_TABLES:
        op.execute(f"DROP TRIGGER IF EXISTS {_activity_trigger(table)} ON {table};")
        op.execute(
            f"""
            CREATE TRIGGER {_activity_trigger(table)}
            AFTER INSERT OR UPDATE OR DELETE ON {table}
            FOR EACH ROW EXECUTE FUNCTION {_ACTIVITY_FUNCTION}();
            """
        )

    op.execute(f"DROP TRIGGER IF EXISTS {_SERIES_COUNT_TRIGGER} ON sermons;")
    op.execute(
        f"""
        CREATE TRIGGER {_SERIES_COUNT_TRIGGER}
        AFTER INSERT OR UPDATE OR DELETE ON sermons
        FOR EACH ROW EXECUTE FUNCTION {_SERIES_COUNT_FUNCTION}();
        """
    )
    op.execute(f"DROP TRIGGER IF EXISTS {_THEME_USAGE_TRIGGER} ON sermon_themes;")
    op.execute(
        f"""
        CREATE TRIGGER {_THEME_USAGE_TRIGGER}
        AFTER INSERT OR DELETE ON sermon_themes
        FOR EACH ROW EXECUTE FUNCTION {_THEME_USAGE_FUNCTION}();
        """
    )


def downgrade() -> None:
    op.execute(f"DROP TRIGGER IF EXISTS {_THEME_USAGE_TRIGGER} ON sermon_themes;")
    op.execute(f"DROP TRIGGER IF EXISTS {_SERIES_COUNT_TRIGGER} ON sermons;")
    for table in ACTIVITY_TABLES:
        op.execute(f"DROP TRIGGER IF EXISTS {_activity_trigger(table)} ON {table};")
    for table in UPDATED_AT_TABLES:
        op.execute(f"DROP TRIGGER IF EXISTS {_updated_at_trigger(table)} ON {table};")
    op.execute(f"DROP FUNCTION IF EXISTS {_THEME_USAGE_FUNCTION}();")
    op.execute(f"DROP FUNCTION IF EXISTS {_SERIES_COUNT_FUNCTION}();")
    op.execute(f"DROP FUNCTION IF EXISTS {_ACTIVITY_FUNCTION}();")
    op.execute(f"DROP FUNCTION IF EXISTS {_UPDATED_AT_FUNCTION}();")
