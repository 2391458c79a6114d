"""Dump the attendance database to backups/ with `mysqldump`.

The JSON export at POST /api/backup/create covers the same data without a
MySQL client install.
"""

from __future__ import annotations

import importlib
import os
import subprocess
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

from school_attendance.config import get_settings_module


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db = settings.DB_CONFIG

    out_dir = Path(__file__).resolve().parents[1] / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_file = out_dir / f"{db['database']}_{ts}.sql"

    cmd = [
        "mysqldump",
        f"--host={db['host']}",
        f"--port={db.get('port', 3306)}",
        f"--user={db['user']}",
        "--single-transaction",
        db["database"],
    ]
    # MYSQL_PWD keeps the password out of argv
    env = dict(os.environ, MYSQL_PWD=str(db.get("password") or ""))

    try:
        with out_file.open("wb") as f:
            subprocess.run(cmd, stdout=f, stderr=subprocess.PIPE, check=True, env=env)
    except FileNotFoundError:
        out_file.unlink(missing_ok=True)
        raise SystemExit("mysqldump not found. Install the MySQL client tools or use POST /api/backup/create.")
    except subprocess.CalledProcessError as exc:
        out_file.unlink(missing_ok=True)
        raise SystemExit(f"mysqldump failed: {exc.stderr.decode(errors='replace').strip()}")
    print(f"OK: Backup created: {out_file}")


if __name__ == "__main__":
    main()
