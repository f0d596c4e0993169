from __future__ import annotations

import logging
from datetime import datetime, timezone
from threading import Lock as ThreadLock
from typing import Dict, Iterable, List, Optional
from uuid import uuid4

from hysio.anamnesis.extract import dedupe_flags
from hysio.anamnesis.parser import parse_structure
from hysio.anamnesis.renderer import assemble_full_text
from hysio.anamnesis.schema import EDITABLE_FIELDS, ClinicalSectionStructure
from hysio.models import AnamnesisSession, GenerationRecord, PatientInfo, SessionMeta

logger = logging.getLogger("hysio.sessions")


class SessionNotFound(KeyError):
    pass


class UnknownField(ValueError):
    pass


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionStore:
    """
    In-memory anamnesis sessions for one application instance.

    Every edit goes through a reconciliation step so full_text and the
    structured fields never drift apart: field edits re-assemble the text,
    full-text edits re-parse the fields. Callers get deep copies.
    """

    def __init__(self) -> None:
        self.lock = ThreadLock()
        self._sessions: Dict[str, AnamnesisSession] = {}

    def __len__(self) -> int:
        with self.lock:
            return len(self._sessions)

    def _get(self, session_id: str) -> AnamnesisSession:
        sid = (session_id or "").strip()
        if not sid or sid not in self._sessions:
            raise SessionNotFound(sid)
        return self._sessions[sid]

    def _touch(self, session: AnamnesisSession) -> None:
        session.session_meta.last_updated_at = _utc_now()

    def create(
        self,
        scheme: str = "hhsb",
        patient: Optional[PatientInfo] = None,
        therapist_id: Optional[str] = None,
    ) -> str:
        session_id = str(uuid4())
        now = _utc_now()
        session = AnamnesisSession(
            session_meta=SessionMeta(
                session_id=session_id,
                therapist_id=therapist_id,
                created_at=now,
                last_updated_at=now,
            ),
            scheme=scheme,
            patient=patient.model_copy(deep=True) if patient else PatientInfo(),
        )
        with self.lock:
            self._sessions[session_id] = session
        logger.info("session.created session_id=%s scheme=%s", session_id, scheme)
        return session_id

    def get(self, session_id: str) -> AnamnesisSession:
        with self.lock:
            return self._get(session_id).model_copy(deep=True)

    def list_ids(self) -> List[str]:
        with self.lock:
            return list(self._sessions.keys())

    def discard(self, session_id: str) -> None:
        with self.lock:
            self._get(session_id)
            del self._sessions[session_id.strip()]
        logger.info("session.discarded session_id=%s", session_id)

    def load_generated_text(
        self,
        session_id: str,
        text: str,
        transcript: str = "",
        generation: Optional[GenerationRecord] = None,
    ) -> AnamnesisSession:
        with self.lock:
            session = self._get(session_id)
            session.structure = parse_structure(text, session.scheme)
            if transcript:
                session.transcript = transcript
            if generation is not None:
                session.generation = generation
            session.last_edit = "generated"
            self._touch(session)
            return session.model_copy(deep=True)

    def apply_full_text_edit(self, session_id: str, text: str) -> AnamnesisSession:
        with self.lock:
            session = self._get(session_id)
            session.structure = parse_structure(text, session.scheme)
            if not session.structure.full_text and isinstance(text, str):
                session.structure.full_text = text
            session.last_edit = "full_text"
            self._touch(session)
            return session.model_copy(deep=True)

    def apply_field_edit(self, session_id: str, field: str, value: str) -> AnamnesisSession:
        if field not in EDITABLE_FIELDS:
            raise UnknownField(field)
        with self.lock:
            session = self._get(session_id)
            updated = session.structure.model_copy(deep=True)
            setattr(updated, field, (value or "").strip())
            updated.full_text = assemble_full_text(updated, session.scheme)
            session.structure = updated
            session.last_edit = "field"
            self._touch(session)
            return session.model_copy(deep=True)

    def apply_red_flags(self, session_id: str, flags: Iterable[str]) -> AnamnesisSession:
        with self.lock:
            session = self._get(session_id)
            updated: ClinicalSectionStructure = session.structure.model_copy(deep=True)
            updated.red_flags = dedupe_flags(flags)
            updated.full_text = assemble_full_text(updated, session.scheme)
            session.structure = updated
            session.last_edit = "red_flags"
            self._touch(session)
            return session.model_copy(deep=True)
