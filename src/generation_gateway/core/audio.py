"""
Raw PCM to WAV container transcoding.
"""

import struct

# Gemini TTS output: 24 kHz, 16-bit, mono, little-endian
PCM_SAMPLE_RATE = 24000
PCM_BITS_PER_SAMPLE = 16
PCM_CHANNELS = 1

WAV_HEADER_SIZE = 44
WAVE_FORMAT_PCM = 1

_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")


def pcm_to_wav(
    pcm: bytes,
    sample_rate: int = PCM_SAMPLE_RATE,
    channels: int = PCM_CHANNELS,
    bits_per_sample: int = PCM_BITS_PER_SAMPLE,
) -> bytes:
    """
    Wrap raw PCM samples in a canonical 44-byte RIFF/WAVE header.

    Args:
        pcm: Little-endian PCM sample bytes
        sample_rate: Samples per second
        channels: Channel count
        bits_per_sample: Bit depth

    Returns:
        WAV file bytes (header followed by the unchanged samples)
    """
    block_align = channels * bits_per_sample // 8
    byte_rate = sample_rate * block_align
    data_size = len(pcm)

    header = _HEADER.pack(
        b"RIFF",
        36 + data_size,
        b"WAVE",
        b"fmt ",
        16,
        WAVE_FORMAT_PCM,
        channels,
        sample_rate,
        byte_rate,
        block_align,
        bits_per_sample,
        b"data",
        data_size,
    )
    return header + bytes(pcm)
