"""SQLite implementation of ConceptRepository."""
from __future__ import annotations
from typing import List, Optional

from superfeynman.domain.concept.models import Concept, ExtractedConcept, ProgressStatus
from superfeynman.persistence.db import get_connection
from superfeynman.persistence.interfaces.concept_repository import ConceptRepository


def _row_to_concept(row) -> Concept:
    return Concept(
        id=row["id"],
        lecture_id=row["lecture_id"],
        name=row["concept_name"],
        description=row["concept_description"],
        progress_status=row["progress_status"],
        created_at=row["created_at"],
        last_reviewed=row["last_reviewed"],
    )


class SqliteConceptRepository(ConceptRepository):

    def create_many(self, lecture_id: int, concepts: List[ExtractedConcept], created_at: str) -> List[int]:
        conn = get_connection()
        ids = []
        try:
            for concept in concepts:
                cur = conn.execute(
                    """
                    INSERT INTO concepts (lecture_id, concept_name, concept_description, progress_status, created_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (lecture_id, concept.name, concept.description, ProgressStatus.NOT_STARTED.value, created_at),
                )
                ids.append(cur.lastrowid)
            conn.commit()
        finally:
            conn.close()
        return ids

    def get_by_id(self, concept_id: int) -> Optional[Concept]:
        conn = get_connection()
        row = conn.execute("SELECT * FROM concepts WHERE id = ?", (concept_id,)).fetchone()
        conn.close()
        return _row_to_concept(row) if row else None

    def list_for_lecture(self, lecture_id: int) -> List[Concept]:
        conn = get_connection()
        rows = conn.execute(
            "SELECT * FROM concepts WHERE lecture_id = ? ORDER BY id ASC",
            (lecture_id,),
        ).fetchall()
        conn.close()
        return [_row_to_concept(r) for r in rows]

    def set_progress(self, concept_id: int, status: str) -> bool:
        conn = get_connection()
        cur = conn.execute(
            "UPDATE concepts SET progress_status = ? WHERE id = ?",
            (status, concept_id),
        )
        conn.commit()
        conn.close()
        return cur.rowcount > 0

    def delete(self, concept_id: int) -> bool:
        conn = get_connection()
        cur = conn.execute("DELETE FROM concepts WHERE id = ?", (concept_id,))
        conn.commit()
        conn.close()
        return cur.rowcount > 0
