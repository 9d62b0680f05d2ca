"""SQLite implementations of CourseRepository and LectureRepository."""
from __future__ import annotations
from typing import List, Optional

from superfeynman.domain.course.models import Course, Lecture
from superfeynman.persistence.db import get_connection
from superfeynman.persistence.interfaces.course_repository import CourseRepository, LectureRepository


def _row_to_course(row) -> Course:
    return Course(id=row["id"], name=row["name"], created_at=row["created_at"])


def _row_to_lecture(row) -> Lecture:
    return Lecture(
        id=row["id"],
        course_id=row["course_id"],
        name=row["name"],
        file_content=row["file_content"],
        created_at=row["created_at"],
    )


class SqliteCourseRepository(CourseRepository):

    def create(self, name: str, created_at: str) -> Course:
        conn = get_connection()
        cur = conn.execute(
            "INSERT INTO courses (name, created_at) VALUES (?, ?)",
            (name, created_at),
        )
        conn.commit()
        conn.close()
        return Course(id=cur.lastrowid, name=name, created_at=created_at)

    def get_by_id(self, course_id: int) -> Optional[Course]:
        conn = get_connection()
        row = conn.execute("SELECT * FROM courses WHERE id = ?", (course_id,)).fetchone()
        conn.close()
        return _row_to_course(row) if row else None

    def list_all(self) -> List[Course]:
        conn = get_connection()
        rows = conn.execute("SELECT * FROM courses ORDER BY created_at DESC, id DESC").fetchall()
        conn.close()
        return [_row_to_course(r) for r in rows]

    def delete(self, course_id: int) -> bool:
        conn = get_connection()
        cur = conn.execute("DELETE FROM courses WHERE id = ?", (course_id,))
        conn.commit()
        conn.close()
        return cur.rowcount > 0


class SqliteLectureRepository(LectureRepository):

    def create(self, course_id: int, name: str, file_content: str, created_at: str) -> Lecture:
        conn = get_connection()
        cur = conn.execute(
            """
            INSERT INTO lectures (course_id, name, file_content, created_at)
            VALUES (:course_id, :name, :file_content, :created_at)
            """,
            {
                "course_id": course_id,
                "name": name,
                "file_content": file_content,
                "created_at": created_at,
            },
        )
        conn.commit()
        conn.close()
        return Lecture(
            id=cur.lastrowid,
            course_id=course_id,
            name=name,
            file_content=file_content,
            created_at=created_at,
        )

    def get_by_id(self, lecture_id: int) -> Optional[Lecture]:
        conn = get_connection()
        row = conn.execute("SELECT * FROM lectures WHERE id = ?", (lecture_id,)).fetchone()
        conn.close()
        return _row_to_lecture(row) if row else None

    def list_for_course(self, course_id: int) -> List[Lecture]:
        conn = get_connection()
        rows = conn.execute(
            "SELECT * FROM lectures WHERE course_id = ? ORDER BY created_at DESC, id DESC",
            (course_id,),
        ).fetchall()
        conn.close()
        return [_row_to_lecture(r) for r in rows]

    def delete(self, lecture_id: int) -> bool:
        conn = get_connection()
        cur = conn.execute("DELETE FROM lectures WHERE id = ?", (lecture_id,))
        conn.commit()
        conn.close()
        return cur.rowcount > 0
