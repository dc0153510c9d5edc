from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

import psycopg
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from coach_advisor.config.settings import Settings

_BENCHMARK_COLUMNS = (
    "id, coach_id, benchmark_type, category, min_value, max_value, typical_value, "
    "notes, industry_filter, times_used, last_used_at"
)
_INTERACTION_COLUMNS = (
    "id, business_id, user_id, coach_id, question, question_type, context, context_data, "
    "ai_response, confidence, business_industry, business_revenue_range, business_state, "
    "action_taken, user_value, coach_reviewed, added_to_library, created_at"
)


class AdvisorDatabase:
    """Postgres-backed data access for coach benchmarks and advisor interactions."""

    def __init__(self, settings: Settings, dsn: str | None = None):
        self.settings = settings
        self.dsn = dsn or settings.active_db_url
        self.schema_file = str(settings.schema_pg_file)
        self.conn = self._connect_pg()

    def _connect_pg(self) -> psycopg.Connection:
        try:
            return psycopg.connect(self.dsn, autocommit=False, row_factory=dict_row)
        except Exception as exc:
            raise RuntimeError(f"Failed to connect to Postgres at {self.dsn}: {exc}") from exc

    def close(self) -> None:
        if getattr(self, "conn", None):
            try:
                self.conn.close()
            finally:
                self.conn = None

    def commit(self) -> None:
        self.conn.commit()

    def rollback(self) -> None:
        self.conn.rollback()

    def initialize_schema(self) -> None:
        sql = Path(self.schema_file).read_text(encoding="utf-8")
        with self.conn.cursor() as cur:
            cur.execute(sql)
        self.commit()

    def check_tables(self) -> List[str]:
        rows = self.conn.execute(
            "SELECT tablename FROM pg_tables WHERE schemaname = 'public' ORDER BY tablename;"
        ).fetchall()
        return [row["tablename"] for row in rows]

    def ping(self) -> None:
        with self.conn.cursor() as cur:
            cur.execute("SELECT 1")
            cur.fetchone()

    # -- coach_benchmarks -------------------------------------------------

    def fetch_benchmark(
        self, coach_id: str, benchmark_type: str, category: str
    ) -> Optional[Dict[str, Any]]:
        return self.conn.execute(
            f"""
            SELECT {_BENCHMARK_COLUMNS}
            FROM coach_benchmarks
            WHERE coach_id = %s AND benchmark_type = %s AND category = %s
            LIMIT 1
            """,
            (coach_id, benchmark_type, category),
        ).fetchone()

    def increment_benchmark_usage(self, coach_id: str, benchmark_type: str, category: str) -> None:
        self.conn.execute(
            """
            UPDATE coach_benchmarks
            SET times_used = times_used + 1, last_used_at = now()
            WHERE coach_id = %s AND benchmark_type = %s AND category = %s
            """,
            (coach_id, benchmark_type, category),
        )

    def upsert_benchmark(self, row: Dict[str, Any]) -> Dict[str, Any]:
        return self.conn.execute(
            f"""
            INSERT INTO coach_benchmarks(
                coach_id, benchmark_type, category, min_value, max_value,
                typical_value, notes, industry_filter
            )
            VALUES (%(coach_id)s, %(benchmark_type)s, %(category)s, %(min_value)s,
                    %(max_value)s, %(typical_value)s, %(notes)s, %(industry_filter)s)
            ON CONFLICT (coach_id, benchmark_type, category) DO UPDATE SET
                min_value = EXCLUDED.min_value,
                max_value = EXCLUDED.max_value,
                typical_value = EXCLUDED.typical_value,
                notes = EXCLUDED.notes,
                industry_filter = EXCLUDED.industry_filter
            RETURNING {_BENCHMARK_COLUMNS}
            """,
            row,
        ).fetchone()

    def fetch_benchmarks(self, coach_id: str | None = None) -> List[Dict[str, Any]]:
        if coach_id:
            return self.conn.execute(
                f"""
                SELECT {_BENCHMARK_COLUMNS} FROM coach_benchmarks
                WHERE coach_id = %s
                ORDER BY times_used DESC, category
                """,
                (coach_id,),
            ).fetchall()
        return self.conn.execute(
            f"SELECT {_BENCHMARK_COLUMNS} FROM coach_benchmarks ORDER BY times_used DESC, category"
        ).fetchall()

    def remove_benchmark(self, benchmark_id: str) -> bool:
        cur = self.conn.execute("DELETE FROM coach_benchmarks WHERE id = %s", (benchmark_id,))
        return cur.rowcount > 0

    # -- ai_interactions --------------------------------------------------

    def insert_interaction(self, row: Dict[str, Any]) -> str:
        payload = dict(row)
        payload["context_data"] = Jsonb(payload.get("context_data") or {})
        payload["ai_response"] = Jsonb(payload["ai_response"])
        created = self.conn.execute(
            """
            INSERT INTO ai_interactions(
                business_id, user_id, coach_id, question, question_type, context,
                context_data, ai_response, confidence, business_industry,
                business_revenue_range, business_state
            )
            VALUES (%(business_id)s, %(user_id)s, %(coach_id)s, %(question)s,
                    %(question_type)s, %(context)s, %(context_data)s, %(ai_response)s,
                    %(confidence)s, %(business_industry)s, %(business_revenue_range)s,
                    %(business_state)s)
            RETURNING id
            """,
            payload,
        ).fetchone()
        return str(created["id"])

    def update_interaction(self, interaction_id: str, **fields: Any) -> bool:
        if not fields:
            return False
        assignments = ", ".join(f"{name} = %({name})s" for name in fields)
        params = dict(fields, interaction_id=interaction_id)
        cur = self.conn.execute(
            f"UPDATE ai_interactions SET {assignments} WHERE id = %(interaction_id)s",
            params,
        )
        return cur.rowcount > 0

    def fetch_interaction(self, interaction_id: str) -> Optional[Dict[str, Any]]:
        return self.conn.execute(
            f"SELECT {_INTERACTION_COLUMNS} FROM ai_interactions WHERE id = %s",
            (interaction_id,),
        ).fetchone()

    def fetch_interactions(
        self,
        question_type: str | None = None,
        search: str | None = None,
        limit: int = 100,
    ) -> List[Dict[str, Any]]:
        clauses: List[str] = []
        params: List[Any] = []
        if question_type:
            clauses.append("question_type = %s")
            params.append(question_type)
        if search:
            clauses.append("question ILIKE %s")
            params.append(f"%{search}%")
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        params.append(limit)
        return self.conn.execute(
            f"""
            SELECT {_INTERACTION_COLUMNS} FROM ai_interactions
            {where}
            ORDER BY created_at DESC
            LIMIT %s
            """,
            params,
        ).fetchall()
