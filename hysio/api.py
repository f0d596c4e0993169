from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response
from pydantic import BaseModel, Field

from hysio.anamnesis.generator import MIN_TRANSCRIPT_CHARS, GenerationError, generate_anamnesis
from hysio.anamnesis.parser import parse_enhanced, parse_structure
from hysio.anamnesis.renderer import assemble_full_text, to_variant_dict
from hysio.anamnesis.schema import ClinicalSectionStructure
from hysio.anamnesis.validator import structure_completeness, validate_completeness
from hysio.export import UnsupportedExportFormat, export_structure
from hysio.models import AnamnesisSession, GenerationRecord, PatientInfo, SchemeLiteral
from hysio.performance import PerformanceMonitor
from hysio.session_store import SessionNotFound, SessionStore, UnknownField

# NOTE: keep router prefixing handled in main.py (include_router(router, prefix="/api"))
router = APIRouter()
logger = logging.getLogger("hysio.api")


def get_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_monitor(request: Request) -> PerformanceMonitor:
    return request.app.state.performance_monitor


def get_llm_client(request: Request) -> Any:
    return getattr(request.app.state, "llm_client", None)


# =========================
# Payloads
# =========================

class ParsePayload(BaseModel):
    text: str = ""
    scheme: SchemeLiteral = "hhsb"


class AssemblePayload(BaseModel):
    scheme: SchemeLiteral = "hhsb"
    primary_concern: str = ""
    history: str = ""
    disorders: str = ""
    limitations: str = ""
    summary: str = ""
    red_flags: List[str] = Field(default_factory=list)


class ValidatePayload(BaseModel):
    text: str = ""
    scheme: SchemeLiteral = "hhsb"


class ExportPayload(BaseModel):
    text: str = ""
    scheme: SchemeLiteral = "hhsb"
    format: str = "txt"
    patient: Optional[PatientInfo] = None


class SessionCreatePayload(BaseModel):
    scheme: SchemeLiteral = "hhsb"
    patient: PatientInfo = Field(default_factory=PatientInfo)
    therapist_id: Optional[str] = None


class GeneratePayload(BaseModel):
    transcript: str
    preparation: Optional[str] = None
    detailed: bool = False


class FullTextPayload(BaseModel):
    text: str = ""


class FieldEditPayload(BaseModel):
    field: str
    value: str = ""


class RedFlagsPayload(BaseModel):
    red_flags: List[str] = Field(default_factory=list)


def _structure_response(structure: ClinicalSectionStructure, scheme: str) -> Dict[str, Any]:
    return {
        "scheme": scheme,
        "structure": structure.model_dump(),
        "variant": to_variant_dict(structure, scheme),
        "completeness": structure_completeness(structure),
    }


def _session_response(session: AnamnesisSession) -> Dict[str, Any]:
    return {
        "session_id": session.session_meta.session_id,
        "last_edit": session.last_edit,
        "updated_at": session.session_meta.last_updated_at.isoformat(),
        **_structure_response(session.structure, session.scheme),
    }


def _not_found() -> HTTPException:
    return HTTPException(status_code=404, detail="Session not found")


# =========================
# Stateless operations
# =========================

@router.get("/ping")
def ping():
    return {"status": "ok"}


@router.post("/anamnesis/parse")
def parse_endpoint(payload: ParsePayload, monitor: PerformanceMonitor = Depends(get_monitor)):
    with monitor.track("anamnesis.parse"):
        structure = parse_structure(payload.text, payload.scheme)
    return _structure_response(structure, payload.scheme)


@router.post("/anamnesis/assemble")
def assemble_endpoint(payload: AssemblePayload, monitor: PerformanceMonitor = Depends(get_monitor)):
    structure = ClinicalSectionStructure(**payload.model_dump(exclude={"scheme"}))
    with monitor.track("anamnesis.assemble"):
        full_text = assemble_full_text(structure, payload.scheme)
    return {"scheme": payload.scheme, "full_text": full_text}


@router.post("/anamnesis/validate")
def validate_endpoint(payload: ValidatePayload, monitor: PerformanceMonitor = Depends(get_monitor)):
    with monitor.track("anamnesis.validate"):
        report = validate_completeness(parse_enhanced(payload.text))
        structure = parse_structure(payload.text, payload.scheme)
    return {
        "report": report.model_dump(),
        "completeness": structure_completeness(structure),
    }


@router.post("/anamnesis/export")
def export_endpoint(payload: ExportPayload, monitor: PerformanceMonitor = Depends(get_monitor)):
    structure = parse_structure(payload.text, payload.scheme)
    try:
        with monitor.track("anamnesis.export"):
            result = export_structure(structure, payload.format, payload.scheme, payload.patient)
    except UnsupportedExportFormat:
        raise HTTPException(status_code=400, detail=f"Unsupported export format: {payload.format}")
    return Response(
        content=result.content,
        media_type=result.media_type,
        headers={"Content-Disposition": f'attachment; filename="{result.filename}"'},
    )


# =========================
# Session lifecycle + reconciliation
# =========================

@router.post("/anamnesis/session")
def create_session(payload: SessionCreatePayload, store: SessionStore = Depends(get_store)):
    session_id = store.create(payload.scheme, payload.patient, payload.therapist_id)
    return {"session_id": session_id}


@router.get("/anamnesis/session/{session_id}")
def get_session(session_id: str, store: SessionStore = Depends(get_store)):
    try:
        return _session_response(store.get(session_id))
    except SessionNotFound:
        raise _not_found()


@router.post("/anamnesis/session/{session_id}/generate")
def generate_endpoint(
    session_id: str,
    payload: GeneratePayload,
    store: SessionStore = Depends(get_store),
    monitor: PerformanceMonitor = Depends(get_monitor),
    llm_client: Any = Depends(get_llm_client),
):
    try:
        session = store.get(session_id)
    except SessionNotFound:
        raise _not_found()

    if len((payload.transcript or "").strip()) < MIN_TRANSCRIPT_CHARS:
        raise HTTPException(status_code=400, detail="No valid transcript available for processing")

    try:
        with monitor.track("anamnesis.generate"):
            result = generate_anamnesis(
                session.patient,
                payload.transcript,
                preparation=payload.preparation,
                scheme=session.scheme,
                client=llm_client,
                detailed=payload.detailed,
            )
    except GenerationError as exc:
        logger.warning("Anamnesis generation failed for session %s: %s", session_id, exc)
        raise HTTPException(status_code=502, detail=str(exc))

    try:
        updated = store.load_generated_text(
            session_id,
            result.text,
            transcript=payload.transcript,
            generation=GenerationRecord(
                model=result.model,
                transcript_hash=result.transcript_hash,
                transcript_chars=result.transcript_chars,
            ),
        )
    except SessionNotFound:
        raise _not_found()
    return _session_response(updated)


@router.put("/anamnesis/session/{session_id}/text")
def edit_full_text(session_id: str, payload: FullTextPayload, store: SessionStore = Depends(get_store)):
    try:
        return _session_response(store.apply_full_text_edit(session_id, payload.text))
    except SessionNotFound:
        raise _not_found()


@router.patch("/anamnesis/session/{session_id}/field")
def edit_field(session_id: str, payload: FieldEditPayload, store: SessionStore = Depends(get_store)):
    try:
        return _session_response(store.apply_field_edit(session_id, payload.field, payload.value))
    except SessionNotFound:
        raise _not_found()
    except UnknownField:
        raise HTTPException(status_code=400, detail=f"Unknown field: {payload.field}")


@router.put("/anamnesis/session/{session_id}/red_flags")
def edit_red_flags(session_id: str, payload: RedFlagsPayload, store: SessionStore = Depends(get_store)):
    try:
        return _session_response(store.apply_red_flags(session_id, payload.red_flags))
    except SessionNotFound:
        raise _not_found()


@router.delete("/anamnesis/session/{session_id}")
def delete_session(session_id: str, store: SessionStore = Depends(get_store)):
    try:
        store.discard(session_id)
    except SessionNotFound:
        raise _not_found()
    return {"status": "ok", "session_id": session_id}


# =========================
# Metrics
# =========================

@router.get("/metrics")
def metrics_endpoint(monitor: PerformanceMonitor = Depends(get_monitor)):
    return {**monitor.summary(), **monitor.check_alerts()}
