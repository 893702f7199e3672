"""Initial schema — candidates, usage records, bank health, config and selection logs.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Settlement agents (payout candidates, and owners of collection endpoints)
    op.create_table(
        "settlement_agents",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=True),
        sa.Column("active", sa.Boolean, nullable=True),
        sa.Column("is_online", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("last_active_at", sa.DateTime, nullable=True),
        sa.Column("priority", sa.String(10), nullable=False, server_default="normal"),
        sa.Column("balance", sa.Float, nullable=False, server_default="0"),
        sa.Column("max_active_workload", sa.Integer, nullable=True),
        sa.Column(
            "created_at", sa.DateTime, nullable=False, server_default=sa.func.now()
        ),
    )
    op.create_index("idx_agents_is_active", "settlement_agents", ["is_active"])

    # Collection endpoints (payin candidates)
    op.create_table(
        "collection_endpoints",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("address", sa.String(200), nullable=False),
        sa.Column(
            "owner_agent_id",
            sa.String(64),
            sa.ForeignKey("settlement_agents.id"),
            nullable=True,
        ),
        sa.Column("is_active", sa.Boolean, nullable=True),
        sa.Column("active", sa.Boolean, nullable=True),
        sa.Column("amount_tier", sa.String(10), nullable=False, server_default="medium"),
        sa.Column("min_amount", sa.Float, nullable=True),
        sa.Column("max_amount", sa.Float, nullable=True),
        sa.Column("daily_volume_limit", sa.Float, nullable=True),
        sa.Column("max_active_workload", sa.Integer, nullable=True),
        sa.Column(
            "created_at", sa.DateTime, nullable=False, server_default=sa.func.now()
        ),
    )
    op.create_index("idx_endpoints_is_active", "collection_endpoints", ["is_active"])
    op.create_index("idx_endpoints_owner", "collection_endpoints", ["owner_agent_id"])

    # Assignment records (source of usage statistics)
    op.create_table(
        "assignment_records",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("kind", sa.String(10), nullable=False),
        sa.Column("candidate_id", sa.String(64), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("amount", sa.Float, nullable=False),
        sa.Column("assigned_at", sa.DateTime, nullable=True),
        sa.Column("completed_at", sa.DateTime, nullable=True),
        sa.Column("cancelled_at", sa.DateTime, nullable=True),
        sa.Column("failed_at", sa.DateTime, nullable=True),
    )
    op.create_index("idx_records_candidate", "assignment_records", ["kind", "candidate_id"])
    op.create_index("idx_records_assigned_at", "assignment_records", ["assigned_at"])

    # Bank health
    op.create_table(
        "bank_health",
        sa.Column("bank", sa.String(32), primary_key=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="healthy"),
        sa.Column("maintenance_windows", JSONB, nullable=False, server_default="[]"),
        sa.Column(
            "updated_at", sa.DateTime, nullable=False, server_default=sa.func.now()
        ),
    )

    # Engine config overrides per kind
    op.create_table(
        "engine_config",
        sa.Column("kind", sa.String(10), primary_key=True),
        sa.Column("overrides", JSONB, nullable=False, server_default="{}"),
        sa.Column(
            "updated_at", sa.DateTime, nullable=False, server_default=sa.func.now()
        ),
    )

    # Selection logs
    op.create_table(
        "selection_logs",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("kind", sa.String(10), nullable=False),
        sa.Column("request_id", sa.String(100), nullable=True),
        sa.Column("subject_id", sa.String(100), nullable=True),
        sa.Column("amount", sa.Float, nullable=False),
        sa.Column("amount_tier", sa.String(10), nullable=False),
        sa.Column("candidates_count", sa.Integer, nullable=False),
        sa.Column("success", sa.Boolean, nullable=False),
        sa.Column("selected_id", sa.String(64), nullable=True),
        sa.Column("error", sa.Text, nullable=True),
        sa.Column("total_attempts", sa.Integer, nullable=False, server_default="0"),
        sa.Column("payload", JSONB, nullable=False),
        sa.Column("created_at", sa.DateTime, nullable=False),
    )
    op.create_index("idx_selection_logs_request", "selection_logs", ["request_id"])
    op.create_index("idx_selection_logs_created", "selection_logs", ["created_at"])


def downgrade() -> None:
    op.drop_table("selection_logs")
    op.drop_table("engine_config")
    op.drop_table("bank_health")
    op.drop_table("assignment_records")
    op.drop_table("collection_endpoints")
    op.drop_table("settlement_agents")
