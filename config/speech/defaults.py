"""Text-to-speech defaults and limits."""

from __future__ import annotations

DEFAULT_VOICE = "en-US-Chirp3-HD-Achernar"
DEFAULT_LANGUAGE_CODE = "en-US"

# LINEAR16 responses carry a WAV header
AUDIO_ENCODING = "LINEAR16"
SAMPLE_RATE_HERTZ = 24000
OUTPUT_MIME_TYPE = "audio/wav"

SPEAKING_RATE_RANGE = (0.25, 4.0)
PITCH_RANGE = (-20.0, 20.0)
PRONUNCIATION_ALPHABETS = ("ipa", "x-sampa")

# Gemini TTS returns headerless 16-bit mono PCM
GEMINI_TTS_DEFAULT_VOICE = "Kore"
GEMINI_TTS_VOICES = ("Zephyr", "Puck", "Charon", "Kore", "Fenrir", "Leda", "Orus", "Aoede")
GEMINI_TTS_STYLES = ("neutral", "cheerful", "sad", "angry", "fearful", "surprised", "calm")
GEMINI_TTS_STYLE_PROMPT = "Say the following text in a {style} tone: {text}"
GEMINI_TTS_SAMPLE_RATE_HERTZ = 24000
GEMINI_TTS_LANGUAGES = {
    "en-US": "English (US)",
    "en-GB": "English (UK)",
    "es-ES": "Spanish (Spain)",
    "es-MX": "Spanish (Mexico)",
    "fr-FR": "French (France)",
    "de-DE": "German (Germany)",
    "it-IT": "Italian (Italy)",
    "pt-BR": "Portuguese (Brazil)",
    "ja-JP": "Japanese (Japan)",
    "ko-KR": "Korean (Korea)",
    "zh-CN": "Chinese (Simplified)",
    "zh-TW": "Chinese (Traditional)",
    "ar-XA": "Arabic",
    "hi-IN": "Hindi (India)",
    "ru-RU": "Russian (Russia)",
}

__all__ = [
    "AUDIO_ENCODING",
    "DEFAULT_LANGUAGE_CODE",
    "DEFAULT_VOICE",
    "GEMINI_TTS_DEFAULT_VOICE",
    "GEMINI_TTS_LANGUAGES",
    "GEMINI_TTS_SAMPLE_RATE_HERTZ",
    "GEMINI_TTS_STYLES",
    "GEMINI_TTS_STYLE_PROMPT",
    "GEMINI_TTS_VOICES",
    "OUTPUT_MIME_TYPE",
    "PITCH_RANGE",
    "PRONUNCIATION_ALPHABETS",
    "SAMPLE_RATE_HERTZ",
    "SPEAKING_RATE_RANGE",
]
