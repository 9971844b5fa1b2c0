"""Autocorrelation pitch estimation for a single audio frame."""

from __future__ import annotations

from typing import ClassVar, Optional, Sequence, Tuple, Union

import numpy as np

from ..core.interfaces import IPitchDetector
from ..logger import get_logger
from ..note_types import Frame, NoPitchReason, PitchEstimate

logger = get_logger(__name__)


class SignalAnalyzer(IPitchDetector):
    """Estimates the fundamental frequency of a monophonic frame.

    The pipeline is: RMS noise gate, trimming of the quiet edges, autocorrelation,
    skipping the zero-lag lobe, picking the strongest remaining lag and refining it
    with a parabola through its neighbours. The analyzer holds no state between
    calls, so one instance can be shared by any number of threads.
    """

    # Minimum RMS level to attempt analysis (below this is treated as silence)
    DEFAULT_NOISE_GATE_RMS: ClassVar[float] = 0.01
    # Samples quieter than this are trimmed from both edges of the frame
    DEFAULT_TRIM_THRESHOLD: ClassVar[float] = 0.2
    # Buffers at least this long are correlated through the FFT
    DEFAULT_FFT_MIN_LENGTH: ClassVar[int] = 4096
    # Fewer samples than this cannot hold a peak with two neighbours
    MIN_BUFFER_LENGTH: ClassVar[int] = 3

    def __init__(
        self,
        noise_gate_rms: Optional[float] = None,
        trim_threshold: Optional[float] = None,
        fft_min_length: Optional[int] = None,
    ) -> None:
        """Initialize the analyzer.

        Args:
            noise_gate_rms: RMS below which a frame is rejected (default 0.01)
            trim_threshold: Absolute level used to trim quiet edges (default 0.2)
            fft_min_length: Trimmed length from which the FFT correlation is used (default 4096)
        """
        self._noise_gate_rms = float(
            noise_gate_rms if noise_gate_rms is not None else self.DEFAULT_NOISE_GATE_RMS
        )
        self._trim_threshold = float(
            trim_threshold if trim_threshold is not None else self.DEFAULT_TRIM_THRESHOLD
        )
        self._fft_min_length = int(
            fft_min_length if fft_min_length is not None else self.DEFAULT_FFT_MIN_LENGTH
        )

    @property
    def noise_gate_rms(self) -> float:
        return self._noise_gate_rms

    @property
    def trim_threshold(self) -> float:
        return self._trim_threshold

    @property
    def fft_min_length(self) -> int:
        return self._fft_min_length

    def analyze_samples(
        self, samples: Union[np.ndarray, Sequence[float]], sample_rate: int
    ) -> PitchEstimate:
        """Validate raw samples as a Frame and analyze it.

        Raises:
            InvalidFrameError: If the samples or sample rate are unusable
        """
        return self.analyze(Frame(samples, sample_rate))

    def analyze(self, frame: Frame) -> PitchEstimate:
        """Estimate the fundamental frequency of a frame.

        Args:
            frame: The frame to analyze

        Returns:
            A detected PitchEstimate, or a no-pitch estimate carrying the reason
        """
        rms = frame.rms
        if rms < self._noise_gate_rms:
            logger.debug(f"Noise gate: rms {rms:.4f} < {self._noise_gate_rms}")
            return PitchEstimate.no_pitch(NoPitchReason.INSUFFICIENT_SIGNAL, rms)

        r1, r2 = self.trim_bounds(frame.samples)
        buffer = frame.samples[r1:r2]
        if len(buffer) < self.MIN_BUFFER_LENGTH:
            logger.debug(f"Trimmed buffer too short: [{r1}, {r2}) of {len(frame)}")
            return PitchEstimate.no_pitch(NoPitchReason.DEGENERATE_AUTOCORRELATION, rms)

        correlation = self.autocorrelate(buffer)
        period = self.estimate_period(correlation)
        if period is None:
            return PitchEstimate.no_pitch(NoPitchReason.DEGENERATE_AUTOCORRELATION, rms)

        frequency = frame.sample_rate / period
        if not np.isfinite(frequency) or frequency <= 0:
            logger.debug(f"Unusable frequency {frequency} from period {period}")
            return PitchEstimate.no_pitch(NoPitchReason.DEGENERATE_AUTOCORRELATION, rms)

        logger.debug(
            f"Detected {frequency:.2f}Hz (period {period:.3f} samples, "
            f"buffer [{r1}, {r2}), rms {rms:.4f})"
        )
        return PitchEstimate.detected(frequency, rms)

    def trim_bounds(self, samples: np.ndarray) -> Tuple[int, int]:
        """Find the [start, end) slice that drops the quiet edges of a frame.

        Scanning forward over the first half, the start moves to each sample
        below the threshold and stops at the first loud one. The end does the
        same backwards over the second half, starting from the last index, so
        the final sample is never included.
        """
        n = len(samples)
        half = (n + 1) // 2
        threshold = self._trim_threshold

        r1 = 0
        for i in range(half):
            if abs(samples[i]) < threshold:
                r1 = i
            else:
                break

        r2 = n - 1
        for i in range(1, half):
            if abs(samples[n - i]) < threshold:
                r2 = n - i
            else:
                break

        return r1, r2

    def autocorrelate(self, buffer: np.ndarray) -> np.ndarray:
        """Return c[i] = sum_j buffer[j] * buffer[j + i] for every lag i < len(buffer)."""
        m = len(buffer)
        if m >= self._fft_min_length:
            # Zero-pad to avoid circular wrap-around
            n_fft = 1 << (2 * m - 1).bit_length()
            spectrum = np.fft.rfft(buffer, n=n_fft)
            return np.fft.irfft(spectrum * np.conj(spectrum), n=n_fft)[:m]
        return np.correlate(buffer, buffer, mode="full")[m - 1 :]

    def estimate_period(self, correlation: np.ndarray) -> Optional[float]:
        """Pick the dominant lag of an autocorrelation and refine it to a fraction.

        Returns:
            The period in samples, or None when no usable peak exists
        """
        m = len(correlation)

        # Walk down the zero-lag lobe
        d = 0
        while d + 1 < m and correlation[d] > correlation[d + 1]:
            d += 1
        if d >= m - 1:
            logger.debug("Autocorrelation decreases monotonically, no periodic peak")
            return None

        max_pos = d + int(np.argmax(correlation[d:]))
        if max_pos <= 0 or correlation[max_pos] <= 0:
            logger.debug(
                f"No usable peak (lag {max_pos}, value {correlation[max_pos]:.4f})"
            )
            return None

        period = float(max_pos)
        if max_pos + 1 < m:
            x1 = correlation[max_pos - 1]
            x2 = correlation[max_pos]
            x3 = correlation[max_pos + 1]
            a = (x1 + x3 - 2 * x2) / 2
            b = (x3 - x1) / 2
            if a != 0:
                period = max_pos - b / (2 * a)

        if not np.isfinite(period) or period <= 0:
            logger.debug(f"Parabolic refinement gave unusable period {period}")
            return None
        return float(period)
