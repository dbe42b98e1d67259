import logging
import os
import sqlite3

logger = logging.getLogger(__name__)

DOWN_MARKER = "-- Down"


class SQLiteMigrator:
    """
    Applies the numbered SQL files in migrations_dir in filename order.

    Each file holds an up script, optionally followed by a '-- Down'
    section that undoes it. Applied files are recorded in _migrations.
    """

    def __init__(self, db_path: str, migrations_dir: str):
        self.db_path = db_path
        self.migrations_dir = migrations_dir

    def _get_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    def _ensure_migration_table(self, conn: sqlite3.Connection) -> None:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS _migrations (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                filename TEXT UNIQUE NOT NULL,
                applied_at DATETIME DEFAULT CURRENT_TIMESTAMP
            );
        """)

    def _get_applied_migrations(self, conn: sqlite3.Connection) -> list[str]:
        cursor = conn.execute("SELECT filename FROM _migrations ORDER BY id ASC")
        return [row[0] for row in cursor.fetchall()]

    def _migration_files(self) -> list[str]:
        return sorted(f for f in os.listdir(self.migrations_dir) if f.endswith(".sql"))

    def pending_migrations(self) -> list[str]:
        """Filenames that run_migrations would apply, in order."""
        conn = self._get_connection()
        try:
            self._ensure_migration_table(conn)
            applied = set(self._get_applied_migrations(conn))
            return [f for f in self._migration_files() if f not in applied]
        finally:
            conn.close()

    def run_migrations(self) -> list[str]:
        """Apply all pending migrations and return the filenames applied."""
        conn = self._get_connection()
        applied_now: list[str] = []
        try:
            self._ensure_migration_table(conn)
            applied = set(self._get_applied_migrations(conn))

            for filename in self._migration_files():
                if filename not in applied:
                    logger.info("Applying migration: %s", filename)
                    self._apply_migration(conn, filename)
                    applied_now.append(filename)

            logger.debug("All migrations applied to %s", self.db_path)
            return applied_now
        finally:
            conn.close()

    def rollback_last(self) -> str | None:
        """
        Run the '-- Down' section of the most recently applied migration.

        Returns the filename rolled back, or None when nothing is applied.
        Raises RuntimeError if the file has no down section or it fails.
        """
        conn = self._get_connection()
        try:
            self._ensure_migration_table(conn)
            applied = self._get_applied_migrations(conn)
            if not applied:
                return None
            filename = applied[-1]
            script = self._read_sections(filename)[1]
            if script is None:
                raise RuntimeError(f"Migration {filename} has no down section")

            logger.info("Rolling back migration: %s", filename)
            try:
                conn.executescript(script)
                conn.execute("DELETE FROM _migrations WHERE filename = ?", (filename,))
                conn.commit()
            except Exception as e:
                conn.rollback()
                raise RuntimeError(f"Rollback of {filename} failed: {e}") from e
            return filename
        finally:
            conn.close()

    def _read_sections(self, filename: str) -> tuple[str, str | None]:
        path = os.path.join(self.migrations_dir, filename)
        with open(path) as f:
            content = f.read()

        # Everything before '-- Down' is the up script
        if DOWN_MARKER in content:
            up, down = content.split(DOWN_MARKER, 1)
            return up, down
        return content, None

    def _apply_migration(self, conn: sqlite3.Connection, filename: str) -> None:
        script = self._read_sections(filename)[0]
        try:
            conn.executescript(script)
            conn.execute("INSERT INTO _migrations (filename) VALUES (?)", (filename,))
            conn.commit()
        except Exception as e:
            conn.rollback()
            raise RuntimeError(f"Migration {filename} failed: {e}") from e
