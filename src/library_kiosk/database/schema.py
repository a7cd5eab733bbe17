"""Table definitions, created on first use (idempotent: CREATE IF NOT EXISTS)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import mysql.connector

if TYPE_CHECKING:
    from .connection import DBConfig


def escape_identifier(identifier: str) -> str:
    return "`" + identifier.replace("`", "``") + "`"


def schema_statements(database: str) -> list[str]:
    db = escape_identifier(database)
    return [
        f"CREATE DATABASE IF NOT EXISTS {db} CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci",
        f"""
        CREATE TABLE IF NOT EXISTS {db}.students (
            id INT UNSIGNED NOT NULL AUTO_INCREMENT,
            student_code VARCHAR(32) NOT NULL,
            class_level VARCHAR(32) NOT NULL,
            room VARCHAR(16) NULL,
            student_number VARCHAR(16) NULL,
            title VARCHAR(64) NULL,
            first_name VARCHAR(128) NOT NULL,
            last_name VARCHAR(128) NOT NULL,
            created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP,
            PRIMARY KEY (id),
            UNIQUE KEY uniq_student_code (student_code)
        ) CHARACTER SET = utf8mb4 COLLATE = utf8mb4_unicode_ci
        """,
        f"""
        CREATE TABLE IF NOT EXISTS {db}.attendance_logs (
            id INT UNSIGNED NOT NULL AUTO_INCREMENT,
            student_id INT UNSIGNED NOT NULL,
            attendance_date DATE NOT NULL,
            attendance_time TIME NOT NULL,
            purposes LONGTEXT NOT NULL,
            created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP,
            PRIMARY KEY (id),
            UNIQUE KEY uniq_student_date (student_id, attendance_date),
            CONSTRAINT fk_attendance_student FOREIGN KEY (student_id)
                REFERENCES {db}.students(id) ON DELETE CASCADE
        ) CHARACTER SET = utf8mb4 COLLATE = utf8mb4_unicode_ci
        """,
        f"""
        CREATE TABLE IF NOT EXISTS {db}.library_scores (
            id INT UNSIGNED NOT NULL AUTO_INCREMENT,
            student_id VARCHAR(32) NOT NULL,
            change_value INT NOT NULL,
            note VARCHAR(255) NOT NULL,
            created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
            PRIMARY KEY (id),
            INDEX idx_scores_student (student_id)
        ) CHARACTER SET = utf8mb4 COLLATE = utf8mb4_unicode_ci
        """,
    ]


def apply_schema(config: "DBConfig") -> None:
    # Server-level connection: the database itself may not exist yet.
    conn = mysql.connector.connect(
        host=config.host,
        port=int(config.port),
        user=config.user,
        password=config.password,
        use_pure=True,
    )
    try:
        cur = conn.cursor()
        try:
            for stmt in schema_statements(config.database):
                cur.execute(stmt)
        finally:
            cur.close()
        conn.commit()
    finally:
        conn.close()
