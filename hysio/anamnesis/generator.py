from __future__ import annotations

import hashlib
import logging
import os
from dataclasses import dataclass
from typing import Any, Optional

from openai import OpenAI

from hysio.models import PatientInfo

from .parser import parse_structure
from .prompts import ANAMNESIS_SYSTEM, ANAMNESIS_USER, ENHANCED_SYSTEM, PREPARATION_BLOCK
from .schema import ClinicalSectionStructure, get_scheme

logger = logging.getLogger("hysio.generator")

ANAMNESIS_MODEL = os.getenv("HYSIO_ANAMNESIS_MODEL", "gpt-4o-mini")
ANAMNESIS_FALLBACK_MODEL = os.getenv("HYSIO_ANAMNESIS_FALLBACK_MODEL", "gpt-4.1-mini")
ANAMNESIS_TEMPERATURE = float(os.getenv("HYSIO_ANAMNESIS_TEMPERATURE", "0.3"))
ANAMNESIS_MAX_TOKENS = int(os.getenv("HYSIO_ANAMNESIS_MAX_TOKENS", "1500"))
MIN_TRANSCRIPT_CHARS = int(os.getenv("HYSIO_MIN_TRANSCRIPT_CHARS", "10"))


class GenerationError(RuntimeError):
    pass


@dataclass
class AnamnesisGenerationResult:
    text: str
    structure: ClinicalSectionStructure
    model: str
    transcript_hash: str
    transcript_chars: int


def _sha256(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def _default_client() -> OpenAI:
    return OpenAI(api_key=os.getenv("OPENAI_API_KEY"))


def build_messages(
    patient: PatientInfo,
    transcript: str,
    preparation: Optional[str] = None,
    scheme: str = "hhsb",
    detailed: bool = False,
) -> list:
    naming = get_scheme(scheme)
    system = ENHANCED_SYSTEM if detailed else ANAMNESIS_SYSTEM[naming.name]
    age = patient.age()
    user = ANAMNESIS_USER.format(
        initials=patient.initials or "onbekend",
        age=f"{age} jaar" if age is not None else "onbekend",
        gender=patient.gender_text(),
        chief_complaint=patient.chief_complaint or "onbekend",
        preparation_block=PREPARATION_BLOCK.format(preparation=preparation.strip()) if (preparation or "").strip() else "",
        transcript=transcript,
        scheme_label=naming.name.upper(),
    )
    return [
        {"role": "system", "content": system},
        {"role": "user", "content": user},
    ]


def _extract_completion_text(resp: Any) -> str:
    choices = getattr(resp, "choices", None)
    if choices is None and isinstance(resp, dict):
        choices = resp.get("choices")
    if not choices:
        return ""
    first = choices[0]
    message = getattr(first, "message", None)
    if message is None and isinstance(first, dict):
        message = first.get("message")
    if message is None:
        return ""
    content = getattr(message, "content", None)
    if content is None and isinstance(message, dict):
        content = message.get("content")
    return (content or "").strip()


def _complete(client: Any, model: str, messages: list, transcript_hash: str, transcript_chars: int) -> str:
    try:
        resp = client.chat.completions.create(
            model=model,
            messages=messages,
            temperature=ANAMNESIS_TEMPERATURE,
            max_tokens=ANAMNESIS_MAX_TOKENS,
        )
    except Exception:
        logger.info(
            "anamnesis.generate model=%s transcript_hash=%s transcript_chars=%s ok=False",
            model,
            transcript_hash[:12],
            transcript_chars,
        )
        raise
    text = _extract_completion_text(resp)
    logger.info(
        "anamnesis.generate model=%s transcript_hash=%s transcript_chars=%s ok=True output_chars=%s",
        model,
        transcript_hash[:12],
        transcript_chars,
        len(text),
    )
    return text


def generate_anamnesis(
    patient: PatientInfo,
    transcript: str,
    preparation: Optional[str] = None,
    scheme: str = "hhsb",
    client: Any = None,
    detailed: bool = False,
) -> AnamnesisGenerationResult:
    """
    Ask the language model for a labeled-block anamnesis and parse it.
    Retries once on the fallback model; raises GenerationError when no text
    comes back.
    """
    transcript = (transcript or "").strip()
    if len(transcript) < MIN_TRANSCRIPT_CHARS:
        raise GenerationError("No valid transcript available for processing")

    naming = get_scheme(scheme)
    transcript_hash = _sha256(transcript)
    transcript_chars = len(transcript)
    messages = build_messages(patient, transcript, preparation, naming.name, detailed)
    llm = client if client is not None else _default_client()

    model = ANAMNESIS_MODEL
    try:
        text = _complete(llm, model, messages, transcript_hash, transcript_chars)
    except Exception as exc:
        logger.warning("Anamnesis generation failed; retrying with fallback model: %s", exc)
        model = ANAMNESIS_FALLBACK_MODEL
        try:
            text = _complete(llm, model, messages, transcript_hash, transcript_chars)
        except Exception as fallback_exc:
            raise GenerationError(f"Failed to generate {naming.name.upper()} analysis: {fallback_exc}") from fallback_exc

    if not text:
        raise GenerationError("No analysis generated")

    return AnamnesisGenerationResult(
        text=text,
        structure=parse_structure(text, naming.name),
        model=model,
        transcript_hash=transcript_hash,
        transcript_chars=transcript_chars,
    )
