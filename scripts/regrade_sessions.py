# scripts/regrade_sessions.py
# Recompute stored session grades after a rubric or threshold change.
from dooriq.database import SessionLocal, init_db
from dooriq.logging_config import app_logger
from dooriq.services.grading.session import regrade_all

init_db()
db = SessionLocal()
try:
    changed = regrade_all(db)
finally:
    db.close()

app_logger.info(f"Regrade complete, {changed} session(s) changed")
