from __future__ import annotations

CREATE_PHASES_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS phases (
  ts_ms BIGINT,
  scenario TEXT,
  phase TEXT,
  suffix TEXT,
  elapsed_ms DOUBLE
);
"""

INSERT_PHASES_SQL = """
INSERT INTO phases
  (ts_ms, scenario, phase, suffix, elapsed_ms)
VALUES (?, ?, ?, ?, ?)
"""

SUMMARY_SQL_TEMPLATE = """
SELECT
  scenario,
  phase,
  COUNT(*) AS n,
  AVG(elapsed_ms) AS avg_ms,
  quantile_cont(elapsed_ms, 0.50) AS p50_ms,
  MAX(elapsed_ms) AS max_ms
FROM phases
{where_sql}
GROUP BY scenario, phase
ORDER BY scenario, phase
"""
