"""
Create the recurring_event and day_log tables if they do not exist.
Usage:  python migrate_recurring.py
"""
from app import app, db
from models import DayLog, RecurringEvent, User


LATE_COLUMNS = [
    ('recurring_event', 'skips', "JSON NOT NULL DEFAULT '[]'"),
    ('recurring_event', 'overrides', "JSON NOT NULL DEFAULT '[]'"),
    ('day_log', 'day_color', 'VARCHAR(7)'),
    ('user', 'timezone', 'VARCHAR(64)'),
]


def main():
    added = []
    with app.app_context():
        RecurringEvent.__table__.create(db.engine, checkfirst=True)
        DayLog.__table__.create(db.engine, checkfirst=True)
        User.__table__.create(db.engine, checkfirst=True)
        # Backfill columns added after initial creation
        with db.engine.begin() as conn:
            for table, column, col_type in LATE_COLUMNS:
                cols = {row[1] for row in conn.execute(db.text(f'PRAGMA table_info("{table}")'))}
                if column not in cols:
                    conn.execute(db.text(f'ALTER TABLE "{table}" ADD COLUMN {column} {col_type}'))
                    app.logger.info(f"Added {table}.{column} column")
                    added.append(f"{table}.{column}")
        app.logger.info("recurring_event and day_log tables are ensured.")
    return added


if __name__ == '__main__':
    main()
