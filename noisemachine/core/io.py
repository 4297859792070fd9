import io
import os
import logging

import numpy as np
import soundfile as sf

from noisemachine.core.errors import (
    FileCloseError,
    FileCreateError,
    FileWriteError,
    UnknownOutputFormat,
)
from noisemachine.params.schema import (
    OUTPUT_CHANNELS,
    OUTPUT_SUBTYPE,
    SUPPORTED_EXTENSIONS,
)

logger = logging.getLogger(__name__)

# Frames per write call; order of writes always follows the buffer
WRITE_BLOCK_FRAMES = 4096


class AudioIO:
    @staticmethod
    def output_format(path: str) -> str:
        """Container format from the filename extension (e.g. 'WAV', 'AIFF')."""
        ext = os.path.splitext(str(path))[1].lower()
        fmt = SUPPORTED_EXTENSIONS.get(ext)
        if fmt is None:
            raise UnknownOutputFormat(
                f"Outfile name {path} has unknown format. "
                f"Use any of {', '.join(SUPPORTED_EXTENSIONS)}"
            )
        return fmt

    @staticmethod
    def _as_float32(data) -> np.ndarray:
        data = np.asarray(data, dtype=np.float32).reshape(-1)
        # Clamp to avoid wrap-around clipping
        return np.clip(data, -1.0, 1.0)

    @staticmethod
    def write_frames(data: np.ndarray, sample_rate: int, path: str) -> int:
        """
        Writes mono float frames to a new sound file, in order.
        The file is closed on every path; a failed write removes the partial file.
        Returns the number of frames written.
        """
        fmt = AudioIO.output_format(path)
        data = AudioIO._as_float32(data)

        try:
            handle = sf.SoundFile(
                str(path), mode="w", samplerate=int(sample_rate),
                channels=OUTPUT_CHANNELS, subtype=OUTPUT_SUBTYPE, format=fmt,
            )
        except (sf.SoundFileError, OSError, ValueError) as exc:
            raise FileCreateError(f"Unable to create outfile {path}: {exc}") from exc

        written = 0
        try:
            for start in range(0, len(data), WRITE_BLOCK_FRAMES):
                block = data[start:start + WRITE_BLOCK_FRAMES]
                handle.write(block)
                written += len(block)
        except (sf.SoundFileError, OSError) as exc:
            logger.error("Write failed after %d of %d frames: %s", written, len(data), exc)
            AudioIO._close_quietly(handle, path)
            AudioIO._remove_partial(path)
            raise FileWriteError(f"Error writing to outfile {path}: {exc}") from exc
        except BaseException:
            AudioIO._close_quietly(handle, path)
            raise

        try:
            handle.close()
        except (sf.SoundFileError, OSError) as exc:
            raise FileCloseError(f"Error closing outfile {path}: {exc}") from exc

        logger.debug("Wrote %d frames to %s", written, path)
        return written

    @staticmethod
    def _close_quietly(handle: sf.SoundFile, path: str) -> None:
        # An earlier error is already propagating; keep it as the reported one
        try:
            handle.close()
        except (sf.SoundFileError, OSError) as exc:
            logger.warning("Error closing outfile %s: %s", path, exc)

    @staticmethod
    def _remove_partial(path: str) -> None:
        try:
            os.remove(path)
        except OSError as exc:
            logger.warning("Could not remove partial outfile %s: %s", path, exc)

    @staticmethod
    def to_bytes(data: np.ndarray, sample_rate: int, format: str = 'WAV') -> bytes:
        """Returns audio file as bytes (for API responses)."""
        buffer = io.BytesIO()
        data = AudioIO._as_float32(data)
        sf.write(
            buffer, data, int(sample_rate),
            subtype=OUTPUT_SUBTYPE, format=format,
        )
        return buffer.getvalue()
