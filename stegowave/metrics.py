import numpy as np
import soundfile as sf


def _read_flat_int16(path) -> np.ndarray:
    data, _ = sf.read(str(path), dtype='int16', always_2d=True)
    # interleaved order, same layout the codec indexes into
    return data.reshape(-1)


def _snr_db(x: np.ndarray, y: np.ndarray) -> float:
    xf = x.astype(np.float64)
    yf = y.astype(np.float64)
    # Normalize to a common peak to avoid scale bias
    peak = max(np.max(np.abs(xf)), np.max(np.abs(yf)), 1e-12)
    xf /= peak
    yf /= peak
    noise = yf - xf
    p_sig = np.mean(xf * xf) + 1e-12
    p_noise = np.mean(noise * noise) + 1e-12
    return float(10.0 * np.log10(p_sig / p_noise))


def compute_snr_db(original_wav, stego_wav) -> float:
    x = _read_flat_int16(original_wav)
    y = _read_flat_int16(stego_wav)
    n = min(x.shape[0], y.shape[0])
    if n == 0:
        return 0.0
    return _snr_db(x[:n], y[:n])


def compute_sample_change_stats(original_wav, stego_wav, lsb_depth: int = 1) -> dict:
    """
    Compute sample-level change metrics between cover and stego.
    lsb_bits_changed counts flipped bits inside the low lsb_depth bit-planes.
    Returns a dict with counts, fractions, max diff, SNR, and BER.
    """
    x = _read_flat_int16(original_wav)
    y = _read_flat_int16(stego_wav)

    n = min(x.shape[0], y.shape[0])
    if n == 0:
        return {
            "samples_total": 0,
            "samples_changed": 0,
            "fraction_changed": 0.0,
            "lsb_bits_changed": 0,
            "max_abs_diff": 0,
            "snr_db": 0.0,
            "ber_lsb": 0.0,
        }

    x = x[:n]
    y = y[:n]
    diff = y.astype(np.int32) - x.astype(np.int32)
    samples_changed = int(np.sum(diff != 0))
    max_abs_diff = int(np.max(np.abs(diff)))

    mask = np.uint16((1 << lsb_depth) - 1)
    flipped = (x.view(np.uint16) ^ y.view(np.uint16)) & mask
    lsb_bits_changed = int(np.unpackbits(flipped.view(np.uint8)).sum())

    return {
        "samples_total": n,
        "samples_changed": samples_changed,
        "fraction_changed": float(samples_changed) / float(n),
        "lsb_bits_changed": lsb_bits_changed,
        "max_abs_diff": max_abs_diff,
        "snr_db": _snr_db(x, y),
        # BER over the lsb_depth bit-planes the codec may rewrite
        "ber_lsb": lsb_bits_changed / float(n * lsb_depth),
    }
