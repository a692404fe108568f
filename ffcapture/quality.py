"""Responsibility: Resolve layered quality options into concrete encoder quality flags.

Each setting is taken from the highest layer that is present:

1. explicit overrides (``crf``, ``video_bitrate``, ``audio_bitrate``,
   ``encoding_speed``)
2. structured presets (``video_quality``, ``audio_quality``)
3. the legacy ``quality`` level
4. built-in defaults (CRF 23, 128k audio, ``medium`` speed)

Everything here is pure: no environment access, no I/O.
"""

from dataclasses import dataclass, replace

from .models import RecorderOptions

DEFAULT_CRF = 23
DEFAULT_SPEED_PRESET = "medium"
DEFAULT_AUDIO_BITRATE = "128k"
DEFAULT_AUDIO_CODEC = "aac"
LOSSLESS_AUDIO_CODEC = "flac"
LOSSLESS = "lossless"

VIDEO_PRESET_CRF = {
    "lossless": 0,
    "visually-lossless": 15,
    "high": 18,
    "medium": 23,
    "low": 28,
    "very-low": 35,
}

LEGACY_VIDEO_CRF = {
    "ultrafast": 35,
    "superfast": 35,
    "veryfast": 35,
    "low": 35,
    "faster": 28,
    "fast": 28,
    "medium": 23,
    "slow": 18,
    "high": 18,
    "slower": 15,
    "veryslow": 15,
    "placebo": 12,
}

AUDIO_PRESET_BITRATE = {
    "high": "256k",
    "medium": "128k",
    "low": "96k",
    "very-low": "64k",
}

LEGACY_AUDIO_BITRATE = {
    "ultrafast": "64k",
    "superfast": "64k",
    "veryfast": "64k",
    "low": "64k",
    "faster": "96k",
    "fast": "96k",
    "medium": "128k",
    "slow": "256k",
    "high": "256k",
    "slower": "320k",
    "veryslow": "320k",
    "placebo": "320k",
}

# The two legacy levels are aliases; the ten speed names map to themselves.
SPEED_ALIASES = {"low": "veryfast", "high": "slow"}

ENCODING_SPEED_DESCRIPTIONS = (
    ("ultrafast", "Fastest encoding, largest file size"),
    ("superfast", "Very fast encoding"),
    ("veryfast", "Fast encoding"),
    ("faster", "Faster than default"),
    ("fast", "Fast encoding"),
    ("medium", "Default balanced speed"),
    ("slow", "Slower encoding, better compression"),
    ("slower", "Much slower encoding"),
    ("veryslow", "Slowest encoding, best compression"),
    ("placebo", "Extremely slow, diminishing returns"),
)

VIDEO_QUALITY_DESCRIPTIONS = (
    ("lossless", "Perfect quality, largest files (CRF 0)"),
    ("visually-lossless", "Visually perfect (CRF 15)"),
    ("high", "High quality (CRF 18)"),
    ("medium", "Good quality (CRF 23)"),
    ("low", "Lower quality (CRF 28)"),
    ("very-low", "Lowest quality (CRF 35)"),
)

AUDIO_QUALITY_DESCRIPTIONS = (
    ("lossless", "Perfect audio quality (FLAC or 320k+)"),
    ("high", "High quality (256k)"),
    ("medium", "Good quality (128k)"),
    ("low", "Lower quality (96k)"),
    ("very-low", "Lowest quality (64k)"),
)


@dataclass(frozen=True)
class QualityPlan:
    """Resolved quality decisions for one recording.

    Video uses either ``crf`` or ``video_bitrate``, never both. ``lossless``
    asks for the extra ``-qp 0`` flag. ``audio_bitrate`` is ``None`` when the
    lossless codec needs no bitrate.
    """

    speed_preset: str
    crf: int | None
    video_bitrate: str | None
    lossless: bool
    audio_codec: str
    audio_bitrate: str | None
    audio_quality: str | None = None

    def video_flags(self) -> list[str]:
        flags = ["-preset", self.speed_preset]
        if self.video_bitrate is not None:
            flags += ["-b:v", self.video_bitrate]
        else:
            flags += ["-crf", str(self.crf)]
        if self.lossless:
            flags += ["-qp", "0"]
        return flags

    def audio_flags(self) -> list[str]:
        flags: list[str] = []
        if self.audio_bitrate is not None:
            flags += ["-b:a", self.audio_bitrate]
        if self.audio_codec == "aac":
            if self.audio_quality in {"high", LOSSLESS}:
                flags += ["-aac_coder", "twoloop"]
        elif self.audio_codec == "libopus":
            flags += ["-application", "audio"]
        elif self.audio_codec == LOSSLESS_AUDIO_CODEC:
            flags += ["-compression_level", "8"]
        return flags


def resolve_speed_preset(encoding_speed: str | None, legacy: str | None) -> str:
    if encoding_speed:
        return SPEED_ALIASES.get(encoding_speed, encoding_speed)
    if legacy:
        return SPEED_ALIASES.get(legacy, DEFAULT_SPEED_PRESET)
    return DEFAULT_SPEED_PRESET


def resolve_video_quality(
    crf: int | None,
    video_bitrate: str | None,
    video_quality: str | None,
    legacy: str | None,
) -> tuple[int | None, str | None]:
    if crf is not None:
        return crf, None
    if video_bitrate:
        return None, video_bitrate
    if video_quality:
        return VIDEO_PRESET_CRF.get(video_quality, DEFAULT_CRF), None
    if legacy:
        return LEGACY_VIDEO_CRF.get(legacy, DEFAULT_CRF), None
    return DEFAULT_CRF, None


def resolve_audio_codec(audio_codec: str | None, audio_quality: str | None) -> str:
    if audio_codec:
        return audio_codec
    if audio_quality == LOSSLESS:
        return LOSSLESS_AUDIO_CODEC
    return DEFAULT_AUDIO_CODEC


def resolve_audio_bitrate(
    audio_bitrate: str | None,
    audio_quality: str | None,
    legacy: str | None,
    codec: str,
) -> str | None:
    if audio_bitrate:
        return audio_bitrate
    if audio_quality:
        if audio_quality == LOSSLESS:
            if codec == LOSSLESS_AUDIO_CODEC:
                return None
            return "320k" if codec == "aac" else "512k"
        return AUDIO_PRESET_BITRATE.get(audio_quality, DEFAULT_AUDIO_BITRATE)
    if legacy:
        return LEGACY_AUDIO_BITRATE.get(legacy, DEFAULT_AUDIO_BITRATE)
    return DEFAULT_AUDIO_BITRATE


def resolve_quality_plan(options: RecorderOptions) -> QualityPlan:
    crf, video_bitrate = resolve_video_quality(
        options.crf, options.video_bitrate, options.video_quality, options.quality
    )
    codec = resolve_audio_codec(options.audio_codec, options.audio_quality)
    return QualityPlan(
        speed_preset=resolve_speed_preset(options.encoding_speed, options.quality),
        crf=crf,
        video_bitrate=video_bitrate,
        lossless=options.video_quality == LOSSLESS,
        audio_codec=codec,
        audio_bitrate=resolve_audio_bitrate(options.audio_bitrate, options.audio_quality, options.quality, codec),
        audio_quality=options.audio_quality,
    )


def get_quality_presets() -> dict[str, list[dict[str, str]]]:
    def _entries(table):
        return [{"value": value, "description": description} for value, description in table]

    return {
        "encoding_speed": _entries(ENCODING_SPEED_DESCRIPTIONS),
        "video_quality": _entries(VIDEO_QUALITY_DESCRIPTIONS),
        "audio_quality": _entries(AUDIO_QUALITY_DESCRIPTIONS),
    }


@dataclass(frozen=True)
class RecommendedQuality:
    video_quality: str
    audio_quality: str
    encoding_speed: str
    description: str

    def apply(self, options: RecorderOptions) -> RecorderOptions:
        return replace(
            options,
            video_quality=self.video_quality,
            audio_quality=self.audio_quality,
            encoding_speed=self.encoding_speed,
        )

    def as_dict(self) -> dict[str, str]:
        return {
            "video_quality": self.video_quality,
            "audio_quality": self.audio_quality,
            "encoding_speed": self.encoding_speed,
            "description": self.description,
        }


RECOMMENDATIONS = {
    "streaming": RecommendedQuality("medium", "medium", "veryfast", "Optimized for real-time streaming with good quality"),
    "archival": RecommendedQuality("visually-lossless", "lossless", "veryslow", "Best quality for long-term storage"),
    "preview": RecommendedQuality("low", "low", "ultrafast", "Quick preview with small file size"),
    "sharing": RecommendedQuality("high", "high", "medium", "Good balance for sharing online"),
}
DEFAULT_RECOMMENDATION = RecommendedQuality("medium", "medium", "medium", "Default balanced settings")
USE_CASES = tuple(RECOMMENDATIONS)


def get_recommended_quality(use_case: str) -> RecommendedQuality:
    return RECOMMENDATIONS.get(use_case, DEFAULT_RECOMMENDATION)
