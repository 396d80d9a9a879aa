"""Pydantic schemas for speech synthesis."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class PronunciationBody(BaseModel):
    phrase: str
    phonetic: str = Field(..., description="Phonetic spelling of the phrase")
    alphabet: str = Field("ipa", description="'ipa' or 'x-sampa'")


class SpeechSynthesizeBody(BaseModel):
    text: str
    provider: Optional[str] = None
    model: Optional[str] = None
    voice: Optional[str] = Field(None, description="Vendor voice name, e.g. 'en-US-Chirp3-HD-Kore'")
    language_code: Optional[str] = None
    speaking_rate: Optional[float] = Field(None, description="0.25 to 4.0")
    pitch: Optional[float] = Field(None, description="-20.0 to 20.0 semitones")
    pronunciations: List[PronunciationBody] = Field(default_factory=list)
    style: Optional[str] = Field(None, description="Delivery tone, e.g. 'cheerful' or 'calm' (gemini_tts)")
    output_uri: Optional[str] = None
