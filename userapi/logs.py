import json, time, uuid, datetime as dt
import logging
import sqlite3
from sqlite3 import Connection
from typing import Optional

logger = logging.getLogger(__name__)

DDL = """
CREATE TABLE IF NOT EXISTS operation_log (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  ts TEXT NOT NULL,
  user TEXT NOT NULL,
  action TEXT NOT NULL,
  entity_type TEXT,
  entity_id TEXT,
  request_id TEXT,
  after_json TEXT,
  payload_json TEXT,
  result TEXT,
  err_msg TEXT,
  latency_ms INTEGER
);
CREATE INDEX IF NOT EXISTS idx_log_ts ON operation_log(ts);
CREATE INDEX IF NOT EXISTS idx_log_action ON operation_log(action);
"""

def ensure_log_schema(conn: Connection):
    conn.executescript(DDL)

class LogContext:
    def __init__(self, conn: Connection, action: str, user: str = "anonymous"):
        self.conn = conn
        self.action = action
        self.user = user
        self.request_id = str(uuid.uuid4())
        self.start = time.perf_counter()
        self.after = None
        self.payload = None
        self.entity_type = None
        self.entity_id = None

    def set_entity(self, etype: str, eid):
        self.entity_type = etype
        self.entity_id = str(eid)

    def set_after(self, obj): self.after = obj
    def set_payload(self, obj): self.payload = obj

    def write(self, result: str = "OK", err: Optional[str] = None):
        elapsed_ms = int((time.perf_counter() - self.start) * 1000)
        rec = {
            "ts": dt.datetime.now(dt.timezone.utc).isoformat(),
            "user": self.user,
            "action": self.action,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "request_id": self.request_id,
            "after_json": json.dumps(self.after, ensure_ascii=False) if self.after is not None else None,
            "payload_json": json.dumps(self.payload, ensure_ascii=False) if self.payload is not None else None,
            "result": result,
            "err_msg": err,
            "latency_ms": elapsed_ms,
        }
        if result != "OK":
            logger.warning("%s failed (request_id=%s): %s", self.action, self.request_id, err)
        # Best effort: a broken log table must not change the response.
        try:
            self.conn.execute(
                """INSERT INTO operation_log
                (ts,user,action,entity_type,entity_id,request_id,after_json,payload_json,result,err_msg,latency_ms)
                VALUES(:ts,:user,:action,:entity_type,:entity_id,:request_id,:after_json,:payload_json,:result,:err_msg,:latency_ms)""",
                rec
            )
        except sqlite3.Error as e:
            logger.warning("operation_log write failed for %s (request_id=%s): %s", self.action, self.request_id, e)

def search_logs(conn: Connection, q: str|None, action: str|None, user_id: int|None, result: str|None, page:int, size:int):
    """Operation log for users, newest first. `user_id` narrows to one user's entries."""
    where = []
    params = {}
    if q:
        where.append("(payload_json LIKE :q OR after_json LIKE :q OR err_msg LIKE :q)")
        params["q"] = f"%{q}%"
    if action:
        where.append("action = :action")
        params["action"] = action
    if user_id is not None:
        where.append("entity_type = 'user' AND entity_id = :entity_id")
        params["entity_id"] = str(user_id)
    if result:
        where.append("result = :result")
        params["result"] = result
    wh = " WHERE " + " AND ".join(where) if where else ""
    sql = f"SELECT * FROM operation_log{wh} ORDER BY id DESC LIMIT :limit OFFSET :offset"
    count_sql = f"SELECT COUNT(1) AS cnt FROM operation_log{wh}"
    total = conn.execute(count_sql, params).fetchone()["cnt"]
    rows = conn.execute(sql, {**params, "limit": size, "offset": (page-1)*size}).fetchall()
    return total, [dict(r) for r in rows]
