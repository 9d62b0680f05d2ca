"""Turns uploaded lecture notes into stored concepts, once per lecture."""
from __future__ import annotations
import logging
import sqlite3
from datetime import datetime, timezone
from typing import List

from superfeynman.domain.common.errors import ErrorKind, ProviderError
from superfeynman.domain.common.result import Result
from superfeynman.domain.concept.models import Concept
from superfeynman.gateways.llm_gateway import LLMGateway
from superfeynman.persistence.interfaces.concept_repository import ConceptRepository

logger = logging.getLogger(__name__)


class ConceptExtractionPipeline:
    def __init__(self, concepts: ConceptRepository, llm: LLMGateway):
        self._concepts = concepts
        self._llm = llm

    def extract_and_persist(self, lecture_id: int, note_text: str) -> Result[List[Concept]]:
        """
        Failure here never undoes the lecture: the caller reports the error
        next to the already-created lecture instead.
        """
        logger.info("Generating concepts for lecture %s", lecture_id)
        try:
            extracted = self._llm.extract_concepts(note_text)
        except ProviderError as e:
            logger.error("Concept generation for lecture %s failed: %s", lecture_id, e)
            return Result.fail(str(e), e.kind)

        now = datetime.now(timezone.utc).isoformat()
        try:
            self._concepts.create_many(lecture_id, extracted, created_at=now)
            concepts = self._concepts.list_for_lecture(lecture_id)
        except sqlite3.Error as e:
            logger.exception("Saving concepts for lecture %s failed", lecture_id)
            return Result.fail(f"Failed to save generated concepts: {e}", ErrorKind.PROVIDER_CALL_FAILED)
        logger.info("Saved %d concepts for lecture %s", len(concepts), lecture_id)
        return Result.ok(concepts)
