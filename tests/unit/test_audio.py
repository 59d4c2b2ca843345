"""
Unit tests for PCM to WAV transcoding.
"""

import struct

import pytest

from generation_gateway.core.audio import WAV_HEADER_SIZE, pcm_to_wav


class TestPcmToWav:
    """Test the WAV container layout."""

    @pytest.mark.parametrize("size", [0, 1, 480, 48000])
    def test_header_size_constant_and_data_length(self, size):
        """Header is always 44 bytes and declares the payload length."""
        pcm = b"\x01\x02" * (size // 2) + b"\x03" * (size % 2)
        wav = pcm_to_wav(pcm)

        assert len(wav) == WAV_HEADER_SIZE + size
        assert struct.unpack_from("<I", wav, 40)[0] == size
        assert struct.unpack_from("<I", wav, 4)[0] == 36 + size
        assert wav[WAV_HEADER_SIZE:] == pcm

    def test_default_format_fields(self):
        """Defaults match 24 kHz 16-bit mono PCM."""
        wav = pcm_to_wav(b"\x00" * 10)

        assert wav[0:4] == b"RIFF"
        assert wav[8:12] == b"WAVE"
        assert wav[12:16] == b"fmt "
        assert wav[36:40] == b"data"
        fmt_size, format_tag, channels, sample_rate, byte_rate, block_align, bits = struct.unpack_from(
            "<IHHIIHH", wav, 16
        )
        assert fmt_size == 16
        assert format_tag == 1
        assert channels == 1
        assert sample_rate == 24000
        assert byte_rate == 48000
        assert block_align == 2
        assert bits == 16

    def test_custom_format(self):
        """Stereo 44.1 kHz computes block alignment and byte rate."""
        wav = pcm_to_wav(b"", sample_rate=44100, channels=2, bits_per_sample=16)
        channels, sample_rate, byte_rate, block_align = struct.unpack_from("<HIIH", wav, 22)

        assert channels == 2
        assert sample_rate == 44100
        assert block_align == 4
        assert byte_rate == 176400

    def test_deterministic(self):
        """Same input, same bytes."""
        assert pcm_to_wav(b"abcd") == pcm_to_wav(b"abcd")
